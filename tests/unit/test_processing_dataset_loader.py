"""Unit tests for loading the proposals dataset."""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from tc39_jira_sync.processing.dataset_loader import DatasetLoader
from tc39_jira_sync.processing.exceptions import DatasetLoadingError
from tc39_jira_sync.synchronize.description import render_proposal_description

DATASET: list[Any] = [
    {
        "id": "proposal-foo",
        "name": "Foo",
        "url": "https://github.com/tc39/proposal-foo",
        "stage": 2.7,
        "notes": [{"date": "2024-02-06", "url": "https://notes/a"}],
        "authors": ["Someone"],
        "champions": ["Someone Else"],
    },
    {"name": "Untitled", "stage": 1},
    {"id": "proposal-shipped", "name": "Shipped", "stage": 4, "edition": 2024},
]


def write_dataset(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "proposals.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_load_from_file(tmp_path: Path) -> None:
    """Records are validated in order and unknown fields are ignored."""
    loader = DatasetLoader()

    dataset = await loader.load_proposals_model(write_dataset(tmp_path, DATASET))

    assert [p.name for p in dataset.proposals] == ["Foo", "Untitled", "Shipped"]
    assert dataset.proposals[0].stage == 2.7
    assert dataset.proposals[0].notes[0].url == "https://notes/a"
    assert dataset.proposals[1].id is None
    assert dataset.proposals[1].notes == []
    assert dataset.proposals[2].edition == 2024


@pytest.mark.asyncio
async def test_load_from_url() -> None:
    """Without a local file, the dataset is fetched from the configured URL."""
    requested_urls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested_urls.append(str(request.url))
        return httpx.Response(200, json=DATASET)

    loader = DatasetLoader(dataset_url="https://tc39.example.com/proposals.json", transport=httpx.MockTransport(handler))

    dataset = await loader.load_proposals_model()

    assert requested_urls == ["https://tc39.example.com/proposals.json"]
    assert len(dataset.proposals) == 3


@pytest.mark.asyncio
async def test_fetch_failure_raises() -> None:
    """A failed download cannot be recovered from."""
    loader = DatasetLoader(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

    with pytest.raises(DatasetLoadingError):
        await loader.load_proposals_model()


@pytest.mark.asyncio
async def test_invalid_records_are_skipped(tmp_path: Path) -> None:
    """Records that fail validation are skipped when the loader is lenient."""
    data = [{"id": "no-name", "stage": 2}, "not an object", {"id": "bad-stage", "name": "Bad", "stage": "two"}, DATASET[0]]
    loader = DatasetLoader()

    dataset = await loader.load_proposals_model(write_dataset(tmp_path, data))

    assert [p.id for p in dataset.proposals] == ["proposal-foo"]


@pytest.mark.asyncio
async def test_invalid_records_raise_when_strict(tmp_path: Path) -> None:
    """A strict loader reports every invalid record."""
    data = [{"id": "no-name", "stage": 2}, "not an object", DATASET[0]]
    loader = DatasetLoader(raise_on_error=True)

    with pytest.raises(DatasetLoadingError) as exc_info:
        await loader.load_proposals_model(write_dataset(tmp_path, data))

    assert [error["record_index"] for error in exc_info.value.errors] == [0, 1]


@pytest.mark.asyncio
async def test_dataset_must_be_a_list(tmp_path: Path) -> None:
    """A dataset that is not a JSON array is rejected."""
    with pytest.raises(DatasetLoadingError):
        await DatasetLoader().load_proposals_model(write_dataset(tmp_path, {"proposals": DATASET}))


@pytest.mark.asyncio
async def test_unreadable_file_raises(tmp_path: Path) -> None:
    """Missing or malformed files raise a loading error."""
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(DatasetLoadingError):
        await DatasetLoader().load_proposals_model(broken)
    with pytest.raises(DatasetLoadingError):
        await DatasetLoader().load_proposals_model(tmp_path / "missing.json")


@pytest.mark.asyncio
async def test_bad_notes_do_not_drop_the_proposal(tmp_path: Path) -> None:
    """Null notes and non-string note dates are tolerated; only the unusable note is lost."""
    data = [
        {"id": "proposal-null-notes", "name": "Null notes", "stage": 2, "notes": None},
        {
            "id": "proposal-bad-date",
            "name": "Bad date",
            "stage": 3,
            "notes": [{"date": 20240206, "url": "https://notes/a"}, {"date": "2024-02-06", "url": "https://notes/b"}],
        },
    ]

    dataset = await DatasetLoader(raise_on_error=True).load_proposals_model(write_dataset(tmp_path, data))

    assert [p.id for p in dataset.proposals] == ["proposal-null-notes", "proposal-bad-date"]
    assert dataset.proposals[0].notes == []
    assert [note.date for note in dataset.proposals[1].notes] == [None, "2024-02-06"]
    description = render_proposal_description("proposal-bad-date", None, dataset.proposals[1].notes)
    assert description.endswith("notes:\n  - 2024-02-06: https://notes/b\n")
