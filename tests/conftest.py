"""Test configuration and fixtures for the change service"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def app():
    from changeapi.main import create_app

    return create_app()


@pytest.fixture
def client(app):
    """FastAPI test client"""
    return TestClient(app)


@pytest.fixture
def change_request():
    """Sample valid change request"""
    return {
        "kind": "Change",
        "apiVersion": "v1",
        "spec": {
            "prompt": "Add comprehensive error handling to all API endpoints",
            "repos": [
                "https://github.com/myorg/repo1",
                "https://github.com/myorg/repo2",
            ],
            "agent": "copilot-cli",
            "branch": "main",
        },
    }


@pytest.fixture
def no_branch_request(change_request):
    """Valid change request without a branch"""
    del change_request["spec"]["branch"]
    return change_request
