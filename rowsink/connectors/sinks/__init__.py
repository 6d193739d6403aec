"""Sink connectors for writing projected rows."""

from rowsink.connectors.sinks.bigquery import BigQuerySink
from rowsink.connectors.sinks.jsonl import JSONLSink
from rowsink.connectors import register_sink

# Register built-in sinks
register_sink("bigquery", BigQuerySink)
register_sink("jsonl", JSONLSink)
