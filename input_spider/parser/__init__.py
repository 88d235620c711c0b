"""input_spider.parser: page parsing and element extraction."""
