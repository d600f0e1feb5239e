"""
ETL pipeline components for the district congestion snapshot.

This package contains every stage of one ETL run:

Modules:
    runner: ETL orchestrator that runs the stages in order under the run lock
    snapshot: Raw payload snapshot writer
    run_lock: Lock file that keeps overlapping runs apart

Subpackages:
    extractors: HTTP fetch of the provider's district ranking
    transformers: JSON decoding into validated TrafficRecord models
    loaders: Transactional batch insert into gz_traffic_index

Architecture:
    The pipeline is strictly sequential:

    1. Fetch - One GET request, no retries
    2. Snapshot - Raw body written verbatim to a local file
    3. Decode - All-or-nothing parse of the JSON array
    4. Load - One transaction, one shared capture timestamp

    Any failure ends the run; later stages never see partial input.

Usage:
    from core.config import load_settings
    from ingestion.runner import ETLRunner

Example:
    runner = ETLRunner(load_settings())
    result = await runner.run()

    print(f"Loaded {result['records_loaded']} records")

Error Handling:
    All components raise exceptions from core.exceptions. Each exception class
    carries the exit code scripts/run_etl.py reports for it.
"""

__all__ = [
    "ETLRunner",
    "TrafficIndexExtractor",
    "SnapshotWriter",
    "TrafficIndexDecoder",
    "TrafficIndexLoader",
    "RunLock",
]
