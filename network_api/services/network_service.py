from sqlalchemy.orm import Session

from store_network.aggregator import aggregate
from store_network.models import NetworkMetrics

from ..schemas import ModeCount, NetworkOverview
from .feed_service import list_area_filters, list_cities, list_zones


def network_overview(db: Session, top: int = 5) -> NetworkOverview:
    """Network-wide counts from the same aggregation the dashboard runs."""
    snapshot = aggregate(list_cities(db), list_area_filters(db), list_zones(db))
    metrics = NetworkMetrics.from_stores(snapshot.catalog)
    return NetworkOverview(
        city_count=len(snapshot.cities),
        area_count=len(snapshot.areas),
        zone_count=len(snapshot.zones),
        store_count=metrics.store_count,
        geocoded_count=metrics.geocoded_count,
        geo_coverage=metrics.geo_coverage,
        total_sqm=metrics.total_sqm,
        top_cities=[
            ModeCount(name=city.name, store_count=city.store_count)
            for city in snapshot.cities[:top]
        ],
    )
