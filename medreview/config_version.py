"""
This module defines pinned versions and is used internally to check whether stored deployment records are compatible
"""
import os

from semantic_version import NpmSpec, Version


class Versions:
    # Read medreview version from VERSION file
    with open(os.path.join(os.path.realpath(os.path.dirname(__file__)), 'VERSION')) as f:
        MEDREVIEW_VERSION = f.read().strip()

    DEPLOYMENT_INFO_COMPATIBILITY = NpmSpec(f'^{MEDREVIEW_VERSION}')

    @staticmethod
    def is_compatible_deployment(version: str) -> bool:
        version = version[1:] if version.startswith('v') else version
        try:
            v = Version(version)
        except ValueError as e:
            raise ValueError(f'Invalid version string {version}\n{e}')
        return Versions.DEPLOYMENT_INFO_COMPATIBILITY.match(v)
