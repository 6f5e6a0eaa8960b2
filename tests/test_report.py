import csv
import json

from seo_scout.report import filter_records, render_csv, render_html, render_json
from seo_scout.report.csv_report import CSV_HEADERS


def test_filter_records(sample_records):
    assert filter_records(sample_records, None) == sample_records
    assert filter_records(sample_records, "  ") == sample_records
    assert [r.url for r in filter_records(sample_records, "BLOG")] == ["https://example.com/blog"]
    assert [r.url for r in filter_records(sample_records, "landing")] == ["https://example.com/"]
    assert [r.url for r in filter_records(sample_records, "sweet")] == ["https://example.com/"]
    assert filter_records(sample_records, "nothing-matches") == []


def test_render_json(tmp_path, sample_records):
    path = render_json(sample_records, tmp_path / "out" / "report.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data) == 3
    assert data[0]["metaDescription"] == "Landing page"
    assert data[2] == {
        "url": "https://example.com/missing",
        "statusCode": 404,
        "title": "",
        "metaDescription": "",
        "canonical": "",
        "h1": "",
        "h2Count": 0,
        "imgCount": 0,
        "imgWithAlt": 0,
        "wordCount": 0,
    }


def test_render_csv(tmp_path, sample_records):
    path = render_csv(sample_records, tmp_path / "report.csv")
    with path.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert tuple(rows[0]) == CSV_HEADERS
    assert rows[1] == [
        "https://example.com/",
        "200",
        'Home, sweet "home"',
        "Landing page",
        "https://example.com/",
        "Welcome",
        "2",
        "3",
        "1",
        "120",
    ]
    assert len(rows) == 4


def test_render_html_escapes_content(tmp_path, sample_records):
    path = render_html(sample_records, None, tmp_path / "report.html")
    html = path.read_text(encoding="utf-8")
    assert "https://example.com/blog" in html
    assert "Home, sweet &#34;home&#34;" in html
    assert "3 pages, 1 errors" in html


def test_render_html_custom_template(tmp_path, sample_records):
    tpl_dir = tmp_path / "tpl"
    tpl_dir.mkdir()
    (tpl_dir / "report.html.j2").write_text("{{ total }}|{% for p in pages %}{{ p.status_code }};{% endfor %}")
    path = render_html(sample_records, tpl_dir, tmp_path / "custom.html")
    assert path.read_text(encoding="utf-8") == "3|200;200;404;"
