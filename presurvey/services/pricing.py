# presurvey/services/pricing.py

from presurvey import config
from presurvey.geo.distance import round_half_up
from presurvey.models import Area, AreaMetricsResponse


def area_metrics(area: Area) -> AreaMetricsResponse:
    """
    Tarifa recomendada para una zona: la tarifa actual escalada por su
    índice de demanda (100 = sin cambio).
    """
    current = config.CURRENT_RATE
    recommended = round_half_up(current * (area.demand_index / 100), 1)
    change_pct = round_half_up(((recommended - current) / current) * 100, 1)

    if area.demand_index > config.HIGH_DEMAND_INDEX:
        rationale = "High demand — modest premium sustainable."
    else:
        rationale = "Moderate demand — align closer to competitor rates."

    return AreaMetricsResponse(
        area=area,
        current_rate=current,
        competitor_avg_rate=config.COMPETITOR_AVG_RATE,
        recommended_rate=recommended,
        change_pct=change_pct,
        rationale=rationale,
    )
