"""site_harvest.parser: sitemap and HTML parsing helpers."""
