"""Handles reading the TC39 proposals dataset.

This module provides the DatasetLoader class, which loads the dataset either from
its published URL or from a local JSON file and validates each record against the
ProposalModel schema. Records that fail validation are logged and skipped unless
the loader is asked to raise. All logging is performed using structlog.
"""

import json
from pathlib import Path
from typing import Any

import httpx
import structlog
from pydantic import ValidationError
from structlog.stdlib import BoundLogger

from tc39_jira_sync.processing.exceptions import DatasetLoadingError
from tc39_jira_sync.schemas.proposal import ProposalModel, ProposalsDatasetModel
from tc39_jira_sync.utils.constants import DEFAULT_DATASET_URL, DEFAULT_HTTP_TIMEOUT

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


class DatasetLoader:
    """Loads and validates proposals from the published dataset or a local copy of it.

    The dataset is a JSON array of proposal objects. Fields the schema does not
    know about are ignored.
    """

    def __init__(
        self,
        dataset_url: str = DEFAULT_DATASET_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        raise_on_error: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize DatasetLoader.

        Args:
            dataset_url (str): URL the dataset is fetched from when no local file is given.
            timeout (float): Timeout in seconds for fetching the dataset.
            raise_on_error (bool): Whether to raise a DatasetLoadingError on invalid records.
            transport (httpx.AsyncBaseTransport | None): Optional transport, used to stub the network.
        """
        self.dataset_url = dataset_url
        self.timeout = timeout
        self.raise_on_error = raise_on_error
        self.transport = transport

    async def load_proposals_model(self, dataset_path: Path | None = None) -> ProposalsDatasetModel:
        """Load the dataset from dataset_path if given, otherwise from the dataset URL."""
        if dataset_path is None:
            data = await self._fetch_dataset()
            source = self.dataset_url
        else:
            data = self._read_dataset_file(dataset_path)
            source = str(dataset_path)

        if not isinstance(data, list):
            logger.error("Dataset is not a list of proposals", source=source, actual_type=type(data).__name__)
            raise DatasetLoadingError(f"Dataset at {source} is not a list of proposals")

        errors: list[dict[str, Any]] = []
        proposals = self._validate_records(data, source, errors)
        if errors:
            logger.error("One or more dataset records were invalid and skipped", source=source, error_count=len(errors))
            if self.raise_on_error:
                raise DatasetLoadingError(f"Invalid records in dataset at {source}", errors)
        logger.info("Loaded proposals dataset", source=source, proposal_count=len(proposals))
        return ProposalsDatasetModel(proposals=proposals)

    async def _fetch_dataset(self) -> Any:
        logger.info("Fetching proposals dataset", url=self.dataset_url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.dataset_url)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch proposals dataset", url=self.dataset_url, error=str(e))
            raise DatasetLoadingError(f"Failed to fetch proposals dataset from {self.dataset_url}: {e}") from e

    def _read_dataset_file(self, path: Path) -> Any:
        logger.info("Reading proposals dataset", path=str(path))
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to read proposals dataset", path=str(path), error=str(e))
            raise DatasetLoadingError(f"Failed to read proposals dataset from {path}: {e}") from e

    def _validate_records(self, data: list[Any], source: str, errors: list[dict[str, Any]]) -> list[ProposalModel]:
        proposals: list[ProposalModel] = []
        for idx, record in enumerate(data):
            if not isinstance(record, dict):
                logger.warning(
                    "Dataset entry is not an object and will be skipped",
                    source=source,
                    record_index=idx,
                    actual_type=type(record).__name__,
                )
                errors.append({"source": source, "record_index": idx, "error": "Dataset entry is not an object"})
                continue
            try:
                proposals.append(ProposalModel.model_validate(record))
            except ValidationError as ve:
                logger.error(
                    "Validation error for proposal",
                    source=source,
                    record_index=idx,
                    proposal_name=record.get("name"),
                    error=ve.errors(),
                )
                errors.append({"source": source, "record_index": idx, "error": ve.errors()})
        return proposals
