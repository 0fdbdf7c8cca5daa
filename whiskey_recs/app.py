from __future__ import annotations

import logging
import os
from functools import partial

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import EventLog
from .auth.dependencies import get_current_user, get_store, require_user
from .auth.users import CredentialStore
from .catalog.data_store import CatalogStore
from .catalog.models import TastingNote, User, UserPreferences, Whiskey
from .catalog.pricing import PriceTier, price_band, tier_rank
from .errors import EmptyResultError, NotFoundError, RangeValidationError, StorageError
from .llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .profiles.notes import delete_tasting_note, evaluated_whiskeys, submit_tasting_note
from .profiles.preferences import (
    dislike_whiskey,
    like_whiskey,
    recently_viewed,
    record_search,
    save_preferences,
    view_whiskey,
)
from .query.classifier import classify
from .recommendations.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .recommendations.filters import filter_for_listing
from .recommendations.models import (
    FilterRequest,
    LoginRequest,
    RecentView,
    RecommendationRequest,
    RecommendationResponse,
    SimilarResponse,
    SortKey,
    SortOrder,
    SortRequest,
    TastingNoteOut,
    TastingNoteRequest,
)
from .recommendations.retrieval import recommend
from .recommendations.similarity import similar_whiskies
from .recommendations.sorting import sort_for_listing, sort_whiskies

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[Exception], int] = {
    NotFoundError: 404,
    EmptyResultError: 404,
    RangeValidationError: 422,
    StorageError: 500,
}


def _service_error_handler(status_code: int):
    def handler(request: Request, exc: Exception) -> JSONResponse:
        if status_code >= 500:
            logger.error("Request to %s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app(
    store: CatalogStore | None = None,
    credentials: CredentialStore | None = None,
    events: EventLog | None = None,
    scoring: ScoringConfig = DEFAULT_SCORING_CONFIG,
    llm: LLMConfig = DEFAULT_LLM_CONFIG,
) -> FastAPI:
    """Build the HTTP app around one catalog store and credential store."""
    app = FastAPI(title="Whiskey Recommendation API", version="1.0.0")
    app.add_middleware(
        SessionMiddleware,
        secret_key=os.environ.get("SESSION_SECRET", "whiskey-recs-secret-change-in-production"),
    )
    app.state.store = store if store is not None else CatalogStore.from_seed()
    app.state.credentials = credentials if credentials is not None else CredentialStore.seeded()
    app.state.events = events if events is not None else EventLog()
    event_log = app.state.events

    for exc_type, status_code in _ERROR_STATUS.items():
        app.add_exception_handler(exc_type, _service_error_handler(status_code))

    classifier = partial(classify, config=llm)

    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metadata")
    def metadata(store: CatalogStore = Depends(get_store)) -> dict:
        df = store.dataframe()
        tags: set[str] = set()
        for val in df["flavor_tags"]:
            tags.update(val)
        tiers = sorted(PriceTier, key=tier_rank)
        return {
            "countries": sorted(df["country"].dropna().unique().tolist()),
            "categories": sorted(df["category"].dropna().unique().tolist()),
            "flavor_tags": sorted(tags),
            "price_tiers": [
                {"tier": t.value, "min_price": price_band(t)[0], "max_price": price_band(t)[1]}
                for t in tiers
            ],
        }

    # ── Auth endpoints ───────────────────────────────────────────────────

    @app.post("/auth/login")
    def login(
        body: LoginRequest,
        request: Request,
        store: CatalogStore = Depends(get_store),
    ) -> dict:
        verified = request.app.state.credentials.authenticate(body.username, body.password)
        account = store.get_user_by_username(body.username) if verified else None
        if account is None:
            raise HTTPException(status_code=401, detail="Invalid credentials")
        user = {"user_id": account.id, "username": account.username}
        request.session["user"] = user
        return {"status": "ok", "user": user}

    @app.post("/auth/logout")
    def logout(request: Request) -> dict:
        request.session.clear()
        return {"status": "logged_out"}

    @app.get("/auth/me")
    def auth_me(user: dict = Depends(require_user)) -> dict:
        return user

    # ── Catalog endpoints ────────────────────────────────────────────────

    @app.get("/whiskies", response_model=list[Whiskey])
    def list_whiskies(
        sort_by: SortKey | None = None,
        order: SortOrder = SortOrder.asc,
        store: CatalogStore = Depends(get_store),
    ) -> list[Whiskey]:
        items = store.get_all()
        if sort_by is not None:
            items = sort_whiskies(items, sort_by, order)
        return items

    @app.post("/whiskies/filter", response_model=list[Whiskey])
    def filter_catalog(body: FilterRequest, store: CatalogStore = Depends(get_store)) -> list[Whiskey]:
        items = filter_for_listing(store.get_all(), body.filters)
        if body.sort_by is not None:
            items = sort_whiskies(items, body.sort_by, body.order)
        return items

    @app.post("/whiskies/sort", response_model=list[Whiskey])
    def sort_catalog(body: SortRequest, store: CatalogStore = Depends(get_store)) -> list[Whiskey]:
        return sort_for_listing(store.get_all(), body.sort_by, body.order)

    @app.get("/whiskies/{whiskey_id}", response_model=Whiskey)
    def whiskey_details(
        whiskey_id: str,
        store: CatalogStore = Depends(get_store),
        user: dict | None = Depends(get_current_user),
    ) -> Whiskey:
        return view_whiskey(store, whiskey_id, user["user_id"] if user else None)

    @app.get("/whiskies/{whiskey_id}/similar", response_model=SimilarResponse)
    def similar(
        whiskey_id: str,
        store: CatalogStore = Depends(get_store),
        user: dict | None = Depends(get_current_user),
    ) -> SimilarResponse:
        results = similar_whiskies(
            store, whiskey_id, user["user_id"] if user else None, scoring, events=event_log,
        )
        return SimilarResponse(reference_id=whiskey_id, similar=results)

    # ── Recommendations ──────────────────────────────────────────────────

    @app.post("/recommendations", response_model=RecommendationResponse)
    def recommendations(
        body: RecommendationRequest,
        store: CatalogStore = Depends(get_store),
        user: dict | None = Depends(get_current_user),
    ) -> RecommendationResponse:
        user_id = user["user_id"] if user else None
        if user_id and body.query.strip():
            record_search(store, user_id, body.query)
        picks = recommend(
            store, body.query, user_id=user_id, filters=body.filters,
            classifier=classifier, config=scoring, events=event_log,
        )
        return RecommendationResponse(recommendations=picks)

    # ── User endpoints ───────────────────────────────────────────────────

    @app.put("/users/me/preferences", response_model=User)
    def put_preferences(
        body: UserPreferences,
        store: CatalogStore = Depends(get_store),
        user: dict = Depends(require_user),
    ) -> User:
        return save_preferences(store, user["user_id"], body)

    @app.post("/users/me/likes/{whiskey_id}", response_model=User)
    def like(
        whiskey_id: str,
        store: CatalogStore = Depends(get_store),
        user: dict = Depends(require_user),
    ) -> User:
        return like_whiskey(store, user["user_id"], whiskey_id)

    @app.post("/users/me/dislikes/{whiskey_id}", response_model=User)
    def dislike(
        whiskey_id: str,
        store: CatalogStore = Depends(get_store),
        user: dict = Depends(require_user),
    ) -> User:
        return dislike_whiskey(store, user["user_id"], whiskey_id)

    @app.get("/users/me/recent-views", response_model=list[RecentView])
    def recent_views(
        store: CatalogStore = Depends(get_store),
        user: dict = Depends(require_user),
    ) -> list[RecentView]:
        return [
            RecentView(whiskey=w, viewed_at=ts)
            for w, ts in recently_viewed(store, user["user_id"])
        ]

    @app.get("/users/me/tasting-notes", response_model=list[TastingNoteOut])
    def my_tasting_notes(
        store: CatalogStore = Depends(get_store),
        user: dict = Depends(require_user),
    ) -> list[TastingNoteOut]:
        return [
            TastingNoteOut(whiskey=w, note=n)
            for w, n in evaluated_whiskeys(store, user["user_id"])
        ]

    # ── Tasting notes ────────────────────────────────────────────────────

    @app.post("/tasting-notes", response_model=TastingNote, status_code=201)
    def create_tasting_note(
        body: TastingNoteRequest,
        store: CatalogStore = Depends(get_store),
        user: dict = Depends(require_user),
    ) -> TastingNote:
        return submit_tasting_note(
            store,
            user["user_id"],
            body.whiskey_id,
            rating=body.rating,
            comment=body.comment,
            body=body.body,
            richness=body.richness,
            smokiness=body.smokiness,
            sweetness=body.sweetness,
            config=scoring,
        )

    @app.delete("/tasting-notes/{note_id}")
    def remove_tasting_note(
        note_id: str,
        store: CatalogStore = Depends(get_store),
        user: dict = Depends(require_user),
    ) -> dict:
        delete_tasting_note(store, user["user_id"], note_id, config=scoring)
        return {"status": "deleted", "id": note_id}

    # ── Analytics ────────────────────────────────────────────────────────

    @app.get("/analytics")
    def analytics(user: dict = Depends(require_user)) -> dict:
        return compute_analytics(event_log.get_events())

    return app


app = create_app()
