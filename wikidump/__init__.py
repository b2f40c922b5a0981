"""Convert MediaWiki/Wikidata XML dumps into line-delimited JSON."""

__version__ = "0.3.0"
