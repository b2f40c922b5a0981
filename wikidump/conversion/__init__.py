"""Streaming conversion of XML dumps into line-delimited JSON."""
