from enum import Enum


class PackageType(Enum):
    """Package types known to the GitHub Packages API.  This tool only
    really cares about containers, but the type is part of every API path.
    """

    CONTAINER = "container"
    DOCKER = "docker"
    NPM = "npm"
    MAVEN = "maven"
    RUBYGEMS = "rubygems"
    NUGET = "nuget"
