"""Resolve the px-backup namespace from a flag or by locating its service."""

from __future__ import annotations

import logging

from pxb_diags.cluster.reader import ClusterReader
from pxb_diags.config import DEFAULT_MARKER_SERVICE
from pxb_diags.errors import ClusterAPIError, NamespaceNotFoundError

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = (
    "Px-backup not found. Please load the px-backup deployed kubeconfig and provide the namespace"
)


class NamespaceResolver:
    """Returns the explicit namespace, else the namespace of the marker service."""

    def __init__(self, reader: ClusterReader, marker_service: str = DEFAULT_MARKER_SERVICE) -> None:
        self.reader = reader
        self.marker_service = marker_service

    def resolve(self, explicit: str | None = None) -> str:
        if explicit:
            return explicit
        logger.info("No namespace given; looking for service %r across all namespaces", self.marker_service)
        try:
            namespace = self.reader.find_service_namespace(self.marker_service)
        except ClusterAPIError as e:
            logger.error("Error listing services: %s", e)
            raise NamespaceNotFoundError(NOT_FOUND_MESSAGE) from e
        if not namespace:
            raise NamespaceNotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Found service %s in namespace %s", self.marker_service, namespace)
        return namespace
