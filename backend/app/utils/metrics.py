"""Prometheus metrics for ingestion, search and answering."""

from prometheus_client import Counter, Histogram

documents_ingested_total = Counter(
    "documents_ingested_total",
    "Total document uploads by outcome",
    ["outcome"],
)

document_chunks = Histogram(
    "document_chunks",
    "Chunks produced per ingested document",
    buckets=[1, 2, 5, 10, 20, 50, 100, 250, 500],
)

doc_searches_total = Counter(
    "doc_searches_total",
    "Total document searches",
    ["outcome"],
)

answer_latency_ms = Histogram(
    "answer_latency_ms",
    "Question answering latency in milliseconds",
    ["mode", "source"],
    buckets=[10, 50, 100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000],
)


class PrometheusDocMetrics:
    """Prometheus-based document metrics implementation."""

    def record_ingest(self, outcome: str, chunks: int | None = None) -> None:
        """Count an upload; observe chunk count for successful ones."""
        documents_ingested_total.labels(outcome=outcome).inc()
        if chunks is not None:
            document_chunks.observe(chunks)

    def record_search(self, hits: int) -> None:
        doc_searches_total.labels(outcome="hit" if hits else "miss").inc()

    def record_answer(self, mode: str, source: str, latency_ms: float) -> None:
        answer_latency_ms.labels(mode=mode, source=source).observe(latency_ms)
