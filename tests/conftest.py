"""Shared fixtures for appfs tests."""

import pytest

from appfs.core.resolver import ModuleResolver
from appfs.core.store import VirtualFileStore
from appfs.project import Project

from tests.helpers import APP_WITH_HEADER, HEADER


@pytest.fixture
def store():
    return VirtualFileStore()


@pytest.fixture
def resolver(store):
    return ModuleResolver(store)


@pytest.fixture
def project():
    return Project()


@pytest.fixture
def header_project(project):
    """/App.jsx importing @/components/Header, both default-exporting."""
    project.write("/App.jsx", "component", APP_WITH_HEADER)
    project.write("/components/Header.jsx", "component", HEADER)
    return project
