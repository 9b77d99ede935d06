from site_harvest.crawler.link_extractor import extract_links

BASE = "https://ex.com/dir/page"


def test_links_resolved_against_base():
    html = '<a href="/a">A</a><a href="b">B</a><a href="https://other.com/c">C</a>'
    assert extract_links(html, BASE) == [
        "https://ex.com/a",
        "https://ex.com/dir/b",
        "https://other.com/c",
    ]


def test_non_http_links_skipped():
    html = (
        '<a href="mailto:me@ex.com">m</a><a href="javascript:void(0)">j</a>'
        '<a href="tel:123">t</a><a href="#top">f</a><a href="ftp://ex.com/f">ftp</a>'
        '<a href="">empty</a><a>no href</a>'
    )
    assert extract_links(html, BASE) == []


def test_fragments_dropped_and_duplicates_removed():
    html = '<a href="/a#one">1</a><a href="/a#two">2</a><a href="/a">3</a>'
    assert extract_links(html, BASE) == ["https://ex.com/a"]


def test_base_tag_honoured():
    html = '<head><base href="https://cdn.ex.com/root/"></head><a href="x">x</a>'
    assert extract_links(html, BASE) == ["https://cdn.ex.com/root/x"]


def test_broken_href_skipped():
    html = '<a href="http://[broken">x</a><a href="/ok">ok</a>'
    assert extract_links(html, BASE) == ["https://ex.com/ok"]


def test_malformed_base_href_falls_back_to_page_url():
    html = '<base href="http://[bad"><a href="/a">A</a><a href="b">B</a>'
    assert extract_links(html, BASE) == ["https://ex.com/a", "https://ex.com/dir/b"]
