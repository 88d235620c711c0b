"""input_spider.crawler: frontier, scope guard, fetcher and dispatcher."""
