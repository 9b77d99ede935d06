"""site_harvest.crawler: sitemap resolution, frontier, transport and the worker pool."""
