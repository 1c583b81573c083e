"""Shared pytest fixtures for test files."""

from __future__ import annotations

import copy

import pytest
from botocore.exceptions import ClientError


class _DefaultResponse(dict):
    """Dict returning empty list for missing keys."""

    def __missing__(self, key):
        return []


class _StubPaginator:
    """Paginator stub yielding a single empty page."""

    def paginate(self, **kwargs):
        del kwargs
        return [_DefaultResponse()]


class _StubBotoClient:
    """Minimal stub for boto3 clients used in tests."""

    def __init__(self, service_name: str, **kwargs):
        self.service_name = service_name
        self.region_name = kwargs.get("region_name")
        self.exceptions = ClientError

    def get_paginator(self, operation_name):
        del operation_name
        return _StubPaginator()

    def __getattr__(self, name: str):
        def _method(*args, **kwargs):
            del args, kwargs
            return copy.deepcopy(_DefaultResponse())

        return _method


@pytest.fixture(autouse=True)
def stub_boto3_client(monkeypatch):
    """Replace boto3.client with a stub so tests don't call real AWS."""

    def fake_client(service_name, **kwargs):
        return _StubBotoClient(service_name, **kwargs)

    monkeypatch.setattr("boto3.client", fake_client)


@pytest.fixture(autouse=True)
def isolate_aws_env(monkeypatch):
    """Keep the developer's AWS configuration out of tests."""
    for name in ("AWS_ENV_FILE", "AWS_DEFAULT_REGION", "AWS_REGION", "AWS_PROFILE"):
        monkeypatch.delenv(name, raising=False)
