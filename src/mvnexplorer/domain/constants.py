from __future__ import annotations

"""
Domain Constants.

Centralizes descriptor naming, discovery defaults, catalog endpoints and the
Maven lifecycle phases exposed as one-click goals.
"""

from typing import List

CURRENT_CONFIG_VERSION = "0.3.0"

DEFAULT_DESCRIPTOR_FILENAME = "pom.xml"
DEFAULT_MAX_DEPTH = -1
DEFAULT_MAVEN_EXECUTABLE = "mvn"
DEFAULT_HISTORY_SIZE = 20

REMOTE_ARCHETYPE_CATALOG_URL = "https://repo.maven.apache.org/maven2/archetype-catalog.xml"
CATALOG_FETCH_TIMEOUT = 10
LOCAL_CATALOG_FILENAME = "archetype-catalog.xml"
BUNDLED_CATALOG_RESOURCE = "archetype-catalog.xml"

LIFECYCLE_GOALS: List[str] = [
    "clean",
    "validate",
    "compile",
    "test",
    "package",
    "verify",
    "install",
    "site",
    "deploy",
]

# Tree presentation
MODULES_GROUP_LABEL = "Modules"
PROJECT_ICON = "project.svg"
MODULES_ICON = "folder.svg"
TERMINAL_LABEL_PREFIX = "Maven-"
ARCHETYPE_TERMINAL_LABEL = "Maven-Archetype"

# Archetype prompt defaults and validation
DEFAULT_ARCHETYPE_GROUP_ID = "org.apache.maven.archetypes"
DEFAULT_ARCHETYPE_ARTIFACT_ID = "maven-archetype-quickstart"
DEFAULT_ARCHETYPE_VERSION = "RELEASE"
COORDINATE_PATTERN = r"^[A-Za-z0-9_\-.]+$"
