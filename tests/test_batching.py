from datetime import datetime, timezone

import pytest

from immprune import batching
from immprune.batching import YearBatch


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_year_batches_descending_and_covering():
    assert batching.build_year_batches(2020, 2023, 2) == [YearBatch(2022, 2023), YearBatch(2020, 2021)]


def test_last_batch_is_clipped_to_start_year():
    assert batching.build_year_batches(2018, 2024, 3) == [
        YearBatch(2022, 2024),
        YearBatch(2019, 2021),
        YearBatch(2018, 2018),
    ]


def test_single_year_batches():
    assert batching.build_year_batches(2021, 2022, 1) == [YearBatch(2022, 2022), YearBatch(2021, 2021)]


def test_invalid_batch_size():
    with pytest.raises(ValueError):
        batching.build_year_batches(2020, 2021, 0)


def test_rank_newest_first_with_filename_tiebreak(make_local):
    same = utc(2022, 1, 1)
    assets = [
        make_local("b.jpg", date=same),
        make_local("old.jpg", date=utc(2020, 1, 1)),
        make_local("a.jpg", date=same),
        make_local("new.jpg", date=utc(2023, 1, 1)),
    ]
    ranked = batching.rank_newest_first(assets)
    assert [a.filename for a in ranked] == ["new.jpg", "a.jpg", "b.jpg", "old.jpg"]


def test_limit_keeps_newest(make_local):
    safe = [make_local("2021.jpg", date=utc(2021, 1, 1)), make_local("2022.jpg", date=utc(2022, 1, 1))]
    plan = batching.plan_report(safe, limit=1)
    assert not plan.batched
    assert [a.filename for a in plan.entries] == ["2022.jpg"]
    assert plan.total == 1


def test_zero_limit_means_unlimited(make_local):
    safe = [make_local(f"{i}.jpg") for i in range(5)]
    assert len(batching.plan_report(safe, limit=0).entries) == 5


def test_batched_plan_groups_and_limits_per_batch(make_local):
    safe = [
        make_local("a.jpg", date=utc(2023, 3, 1)),
        make_local("b.jpg", date=utc(2022, 3, 1)),
        make_local("c.jpg", date=utc(2023, 9, 1)),
        make_local("d.jpg", date=utc(2020, 1, 1)),
    ]
    batches = batching.build_year_batches(2020, 2023, 2)
    plan = batching.plan_report(safe, batches=batches, limit_per_batch=2)
    assert plan.batched
    assert plan.total == 4
    (b1, g1), (b2, g2) = plan.groups
    assert b1 == YearBatch(2022, 2023)
    assert [a.filename for a in g1] == ["c.jpg", "a.jpg"]
    assert b2 == YearBatch(2020, 2021)
    assert [a.filename for a in g2] == ["d.jpg"]


def test_empty_batches_are_kept(make_local):
    safe = [make_local("a.jpg", date=utc(2023, 1, 1))]
    plan = batching.plan_report(safe, batches=batching.build_year_batches(2019, 2023, 2))
    assert [len(g) for _, g in plan.groups] == [1, 0, 0]
