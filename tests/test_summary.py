import itertools
from datetime import datetime, timezone

from kb_export.summary import generate_summary, parse_date


def make_article(**fields):
    article = {
        "id": "ka0",
        "articleType": "FAQ",
        "language": "en_US",
        "publishStatus": "Online",
        "isVisibleInPkb": False,
        "isVisibleInCsp": False,
        "isVisibleInPrm": False,
        "createdDate": None,
    }
    article.update(fields)
    return article


def test_two_article_example():
    articles = [
        {"articleType": "FAQ", "language": "en", "isVisibleInPkb": True, "createdDate": "2023-01-01"},
        {"articleType": "FAQ", "language": "fr", "isVisibleInPkb": False, "createdDate": "2023-06-01"},
    ]
    summary = generate_summary(articles)
    assert summary["totalArticles"] == 2
    assert summary["articleTypes"] == {"FAQ": 2}
    assert summary["languages"] == {"en": 1, "fr": 1}
    assert summary["visibilityStats"]["visibleInPkb"] == 1
    assert summary["dateRange"] == {"earliest": "2023-01-01", "latest": "2023-06-01"}


def test_empty_input():
    summary = generate_summary([])
    assert summary["totalArticles"] == 0
    assert summary["articleTypes"] == {}
    assert summary["visibilityStats"] == {"visibleInPkb": 0, "visibleInCsp": 0, "visibleInPrm": 0}
    assert summary["dateRange"] == {"earliest": None, "latest": None}


def test_summary_keys():
    summary = generate_summary([make_article()])
    assert list(summary.keys()) == [
        "exportDate",
        "totalArticles",
        "articleTypes",
        "languages",
        "publishStatuses",
        "visibilityStats",
        "dateRange",
    ]


def test_export_date_is_utc_iso():
    now = datetime(2024, 3, 1, 9, 15, 0, 123000, tzinfo=timezone.utc)
    assert generate_summary([], now=now)["exportDate"] == "2024-03-01T09:15:00.123Z"


def test_absent_and_null_categories_get_literal_buckets():
    articles = [make_article(), {"id": "ka1"}, make_article(publishStatus=None)]
    summary = generate_summary(articles)
    assert summary["articleTypes"] == {"FAQ": 2, "undefined": 1}
    assert summary["publishStatuses"] == {"Online": 1, "undefined": 1, "null": 1}


def test_visibility_counts_truthy_values():
    articles = [
        make_article(isVisibleInPkb=True, isVisibleInCsp=True),
        make_article(isVisibleInPkb=True, isVisibleInPrm=True),
        make_article(isVisibleInPkb=None),
    ]
    stats = generate_summary(articles)["visibilityStats"]
    assert stats == {"visibleInPkb": 2, "visibleInCsp": 1, "visibleInPrm": 1}


def test_date_range_skips_unparseable_values():
    articles = [
        make_article(createdDate="not a date"),
        make_article(createdDate=""),
        make_article(createdDate="2023-05-10T08:00:00.000+0000"),
        make_article(createdDate="2022-11-30T23:59:59.000Z"),
        {"id": "no-date"},
    ]
    date_range = generate_summary(articles)["dateRange"]
    assert date_range == {
        "earliest": "2022-11-30T23:59:59.000Z",
        "latest": "2023-05-10T08:00:00.000+0000",
    }


def test_date_range_ties_keep_first_literal():
    articles = [
        make_article(createdDate="2023-01-01T00:00:00Z"),
        make_article(createdDate="2023-01-01"),
    ]
    date_range = generate_summary(articles)["dateRange"]
    assert date_range["earliest"] == "2023-01-01T00:00:00Z"
    assert date_range["latest"] == "2023-01-01T00:00:00Z"


def test_counts_are_order_independent():
    articles = [
        make_article(articleType="FAQ", language="en_US", isVisibleInPkb=True, createdDate="2023-01-01"),
        make_article(articleType="How_To", language="fr", isVisibleInCsp=True, createdDate="2021-07-04"),
        make_article(articleType="FAQ", language="de", publishStatus="Draft", createdDate="2024-02-29"),
        {"id": "bare"},
    ]
    count_keys = ["totalArticles", "articleTypes", "languages", "publishStatuses", "visibilityStats"]
    expected = generate_summary(articles)
    for perm in itertools.permutations(articles):
        summary = generate_summary(list(perm))
        for key in count_keys:
            assert summary[key] == expected[key]
        assert parse_date(summary["dateRange"]["earliest"]) == parse_date("2021-07-04")
        assert parse_date(summary["dateRange"]["latest"]) == parse_date("2024-02-29")


def test_parse_date():
    assert parse_date("2023-01-01") == datetime(2023, 1, 1, tzinfo=timezone.utc)
    assert parse_date("2023-01-15T10:30:00.000+0000") == datetime(2023, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert parse_date(None) is None
    assert parse_date(20230101) is None
    assert parse_date("yesterday") is None
