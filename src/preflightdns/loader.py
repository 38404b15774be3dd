# SPDX-FileCopyrightText: 2025 preflight-dns contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Job loading from YAML/JSON documents and CLI-style header lists."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import JobDecodeError
from .models.job import Headers, Job

logger = logging.getLogger(__name__)


def parse_job_document(text: str) -> Job:
    """Decode a job document, trying YAML first and JSON second."""
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as yaml_exc:
        logger.debug("Job document is not YAML (%s); trying JSON", yaml_exc)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise JobDecodeError(f"error unmarshalling config: {exc}") from exc
    if data is None:
        data = {}
    return Job.from_mapping(data)


def load_job_file(path: str | Path) -> Job:
    """Read a job file from disk; see parse_job_document."""
    file_path = Path(path)
    logger.debug("Loading job file %s", file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise JobDecodeError(f"error reading file {file_path}: {exc}") from exc
    return parse_job_document(text)


def parse_header_list(raw: str | None) -> Headers:
    """
    Parse the ``--headers`` flag: comma separated ``name=value`` pairs.

    Only the first ``=`` splits, so values may contain ``=``.
    """
    headers: Headers = {}
    if not raw:
        return headers
    for item in raw.split(","):
        if not item.strip():
            continue
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise JobDecodeError(f"invalid header {item!r}: expected name=value")
        headers[name] = value.strip()
    return headers


__all__ = ["load_job_file", "parse_header_list", "parse_job_document"]
