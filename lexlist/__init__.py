"""Character record extraction library.

Subpackages:
- lexlist.common: Shared utilities (utils, logging, config, fetching, storage)
- lexlist.schema: Record data model (stroke vectors, word entries, character records)
- lexlist.extract: Page extractors (metadata, vocabulary, animation) and record assembly
- lexlist.index: Corpus-wide index generation
- lexlist.crawl: Sequential crawl loop
"""
