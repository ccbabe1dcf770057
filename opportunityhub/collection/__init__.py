from opportunityhub.collection.collectors import get_collector, register_collector, COLLECTOR_REGISTRY
from opportunityhub.collection.normalize import normalize, parse_deadline
from opportunityhub.collection.dedup import is_duplicate
from opportunityhub.collection.scoring import ScoringPolicy, score_record
from opportunityhub.collection.pipeline import run_collection, CollectionResult
from opportunityhub.collection.errors import ScrapeFailure, PersistenceFailure
