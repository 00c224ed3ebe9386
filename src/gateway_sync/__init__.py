"""Synchronize Kubernetes custom resources into the APISIX admin API."""

__version__ = "0.1.0"
