from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query

from fixture_scores.log_buffer import get_activity_log, install_activity_log
from fixture_scores.scoring.aggregates import (
    calculate_opponent_records,
    calculate_quarter_averages,
    calculate_win_rate,
)
from fixture_scores.scoring.display import format_score
from fixture_scores.scoring.engine import calculate_game_score
from fixture_scores.scoring.reconcile import (
    TeamTally,
    get_reconciled_score,
    score_discrepancy_warning,
    validate_inter_club_scores,
)
from fixture_scores.schemas import (
    DisplayResponse,
    GameScoreOut,
    GameScoreRequest,
    GameScoreResponse,
    OpponentRecordOut,
    QuarterAverageOut,
    ReconcileRequest,
    ReconcileResponse,
    TeamGamesRequest,
    WinRateOut,
)

app = FastAPI(title="Fixture Scores")
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def start_activity_log() -> None:
    install_activity_log()
    logger.info("App starting up, activity log installed")


def _score_request(payload: GameScoreRequest):
    return calculate_game_score(
        payload.game,
        payload.official_scores,
        payload.perspective,
        payload.club_team_ids,
    )


@app.post("/api/scores/game", response_model=GameScoreResponse)
def api_game_score(payload: GameScoreRequest):
    result = _score_request(payload)
    logger.info(
        "Scored game id=%s perspective=%s result=%s source=%s",
        payload.game.id,
        payload.perspective,
        result.result,
        result.score_source,
        extra={
            "game_id": payload.game.id,
            "perspective": payload.perspective,
            "result": result.result,
            "source": result.score_source,
        },
    )
    return GameScoreResponse(
        game_id=payload.game.id,
        score=GameScoreOut.model_validate(result),
        display=format_score(payload.game, result, payload.perspective),
    )


@app.post("/api/scores/display", response_model=DisplayResponse)
def api_display_score(payload: GameScoreRequest):
    result = _score_request(payload)
    return DisplayResponse(
        game_id=payload.game.id,
        display=format_score(payload.game, result, payload.perspective),
        result=result.result,
    )


@app.post("/api/scores/win-rate", response_model=WinRateOut)
def api_win_rate(payload: TeamGamesRequest):
    result = calculate_win_rate(
        payload.games,
        payload.team_id,
        payload.official_scores,
        payload.club_team_ids,
    )
    logger.info(
        "Win rate team_id=%s games=%s counted=%s win_rate=%.1f",
        payload.team_id,
        len(payload.games),
        result.total_games,
        result.win_rate,
        extra={"team_id": payload.team_id},
    )
    return WinRateOut.model_validate(result)


@app.post("/api/scores/quarter-averages", response_model=list[QuarterAverageOut])
def api_quarter_averages(payload: TeamGamesRequest):
    averages = calculate_quarter_averages(
        payload.games,
        payload.team_id,
        payload.official_scores,
        payload.club_team_ids,
    )
    return [QuarterAverageOut.model_validate(average) for average in averages]


@app.post("/api/scores/opponents", response_model=list[OpponentRecordOut])
def api_opponent_records(payload: TeamGamesRequest):
    records = calculate_opponent_records(
        payload.games,
        payload.team_id,
        payload.official_scores,
        payload.club_team_ids,
        payload.opponent_names,
    )
    return [OpponentRecordOut.model_validate(record) for record in records]


@app.post("/api/scores/reconcile", response_model=ReconcileResponse)
def api_reconcile(payload: ReconcileRequest):
    home = TeamTally(payload.home.team_id, payload.home.goals_for, payload.home.goals_against)
    away = TeamTally(payload.away.team_id, payload.away.goals_for, payload.away.goals_against)
    try:
        reconciled = get_reconciled_score(home, away, payload.strategy)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    mismatch = validate_inter_club_scores(home, away)
    warning = score_discrepancy_warning(mismatch)
    if warning:
        logger.warning("Inter-club game home=%s away=%s: %s", home.team_id, away.team_id, warning)
    return ReconcileResponse(
        home_score=reconciled.home_score,
        away_score=reconciled.away_score,
        method=reconciled.method,
        is_valid=mismatch.is_valid,
        home_discrepancy=mismatch.home_discrepancy,
        away_discrepancy=mismatch.away_discrepancy,
        warning=warning,
    )


@app.get("/api/logs")
def api_logs(
    limit: int = 100,
    level: Optional[str] = None,
    logger_name: Optional[str] = Query(None, alias="logger"),
):
    try:
        entries = get_activity_log().entries(limit, min_level=level, logger_prefix=logger_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"entries": entries}
