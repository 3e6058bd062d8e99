"""Unit tests for snapshot filtering and pagination."""
import random

import pytest

from src.csi.errors import Aborted, InvalidArgument, NotFound
from src.csi.pagination import filter_snapshots, paginate, parse_token
from src.models.models import SnapshotSpec


def make_snapshots(count: int, volume_id: str = "vol-a"):
    return [SnapshotSpec(id=f"snap-{i:03d}", volume_id=volume_id, name=f"s{i}") for i in range(count)]


@pytest.fixture
def mixed_snapshots():
    return make_snapshots(3, "vol-a") + [
        SnapshotSpec(id="snap-100", volume_id="vol-b"),
        SnapshotSpec(id="snap-101", volume_id="vol-b"),
    ]


class TestFilterSnapshots:
    def test_no_filters_returns_everything(self, mixed_snapshots):
        assert filter_snapshots(mixed_snapshots) == mixed_snapshots

    def test_no_filters_on_empty_listing(self):
        assert filter_snapshots([]) == []

    def test_by_source_volume(self, mixed_snapshots):
        result = filter_snapshots(mixed_snapshots, source_volume_id="vol-b")
        assert [s.id for s in result] == ["snap-100", "snap-101"]

    def test_by_source_volume_not_found(self, mixed_snapshots):
        with pytest.raises(NotFound, match="vol-z"):
            filter_snapshots(mixed_snapshots, source_volume_id="vol-z")

    def test_by_snapshot_id(self, mixed_snapshots):
        result = filter_snapshots(mixed_snapshots, snapshot_id="snap-001")
        assert [s.id for s in result] == ["snap-001"]

    def test_by_snapshot_id_not_found(self, mixed_snapshots):
        with pytest.raises(NotFound, match="snap-999"):
            filter_snapshots(mixed_snapshots, snapshot_id="snap-999")

    def test_both_filters_intersect(self, mixed_snapshots):
        result = filter_snapshots(mixed_snapshots, snapshot_id="snap-100", source_volume_id="vol-b")
        assert [s.id for s in result] == ["snap-100"]

    def test_both_filters_mismatch_names_both(self, mixed_snapshots):
        with pytest.raises(NotFound) as exc:
            filter_snapshots(mixed_snapshots, snapshot_id="snap-100", source_volume_id="vol-a")
        assert "snap-100" in exc.value.message
        assert "vol-a" in exc.value.message


class TestParseToken:
    def test_empty_token_is_zero(self):
        assert parse_token("") == 0

    def test_decimal_token(self):
        assert parse_token("42") == 42

    @pytest.mark.parametrize("token", ["abc", "-1", "1.5", " 3", "0x10"])
    def test_malformed_token(self, token):
        with pytest.raises(Aborted):
            parse_token(token)


class TestPaginate:
    def test_sorted_by_id(self):
        snapshots = make_snapshots(10)
        shuffled = list(snapshots)
        random.Random(7).shuffle(shuffled)
        page, next_token = paginate(shuffled)
        assert [s.id for s in page] == [s.id for s in snapshots]
        assert next_token == ""

    def test_sort_is_lexicographic(self):
        snapshots = [SnapshotSpec(id=i) for i in ("10", "9", "100", "1")]
        page, _ = paginate(snapshots)
        assert [s.id for s in page] == ["1", "10", "100", "9"]

    def test_first_page_sets_next_token(self):
        page, next_token = paginate(make_snapshots(5), max_entries=2)
        assert [s.id for s in page] == ["snap-000", "snap-001"]
        assert next_token == "2"

    def test_last_partial_page_clears_token(self):
        page, next_token = paginate(make_snapshots(5), max_entries=2, starting_token="4")
        assert [s.id for s in page] == ["snap-004"]
        assert next_token == ""

    def test_exact_fit_clears_token(self):
        page, next_token = paginate(make_snapshots(4), max_entries=2, starting_token="2")
        assert len(page) == 2
        assert next_token == ""

    def test_zero_max_entries_returns_rest(self):
        page, next_token = paginate(make_snapshots(5), max_entries=0, starting_token="1")
        assert len(page) == 4
        assert next_token == ""

    @pytest.mark.parametrize("count,k", [(7, 1), (7, 2), (7, 3), (7, 7), (1, 5), (12, 5)])
    def test_following_tokens_is_complete(self, count, k):
        snapshots = make_snapshots(count)
        random.Random(count * k).shuffle(snapshots)

        seen, token = [], ""
        while True:
            page, token = paginate(snapshots, max_entries=k, starting_token=token)
            seen.extend(s.id for s in page)
            if not token:
                break

        assert seen == sorted(s.id for s in snapshots)
        assert len(set(seen)) == count

    def test_token_at_length_is_aborted(self):
        with pytest.raises(Aborted):
            paginate(make_snapshots(3), starting_token="3")

    def test_token_past_length_is_aborted(self):
        with pytest.raises(Aborted):
            paginate(make_snapshots(3), starting_token="30")

    def test_token_on_empty_set_is_aborted(self):
        with pytest.raises(Aborted):
            paginate([])

    def test_negative_max_entries(self):
        with pytest.raises(InvalidArgument):
            paginate(make_snapshots(3), max_entries=-1)

    def test_token_is_positional_across_mutation(self):
        """A snapshot added before the offset shifts the next page by one."""
        snapshots = make_snapshots(4)
        page, token = paginate(snapshots, max_entries=2)
        assert [s.id for s in page] == ["snap-000", "snap-001"]

        snapshots.append(SnapshotSpec(id="snap-0005"))  # sorts between 000 and 001
        page, token = paginate(snapshots, max_entries=2, starting_token=token)
        assert [s.id for s in page] == ["snap-001", "snap-002"]
        assert token == "4"
