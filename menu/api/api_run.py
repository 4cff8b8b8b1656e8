from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from functools import lru_cache
from threading import Lock
import logging

from menu.domain.Plan import Plan
from menu.infra.Plan_Repository import JsonFilePlanStore, PlanStore
from menu.infra.Recipe_Lookup import HttpRecipeLookup, LocalRecipeLookup, RecipeLookupService
from menu.logic.generation.generator import PlanGenerator
from menu.logic.shopping.list_builder import build_shopping_list
from menu.utilities.config import PLAN_FILE, RANDOM_SEED, RECIPE_API_TIMEOUT, RECIPE_API_URL, RECIPES_FILE, RECIPES_SOURCE
from menu.utilities.errors import GenerationFailed, InvalidSlot
from menu.utilities.validators import DayInput, MealToggleInput, ServingsInput, SettingsInput, SlotInput
from menu.domain.Slot import SlotKey

# Logging
logger = logging.getLogger("menu_app")

# Initialize FastAPI app
app = FastAPI(title="Menu Generator & Shopping List API")

# One generation at a time; concurrent requests get a 409
_generation_lock = Lock()


# -------------------- Collaborators --------------------
@lru_cache(maxsize=1)
def get_store() -> PlanStore:
    return JsonFilePlanStore(PLAN_FILE)


@lru_cache(maxsize=1)
def get_lookup() -> RecipeLookupService:
    if RECIPES_SOURCE == "http":
        logger.info("Using recipe API at %s", RECIPE_API_URL)
        return HttpRecipeLookup(RECIPE_API_URL, timeout=RECIPE_API_TIMEOUT)
    logger.info("Using local recipes from %s", RECIPES_FILE)
    return LocalRecipeLookup.from_json(RECIPES_FILE, seed=RANDOM_SEED)


def get_generator(lookup: RecipeLookupService = Depends(get_lookup),
                  store: PlanStore = Depends(get_store)) -> PlanGenerator:
    return PlanGenerator(lookup, store)


# -------------------- Helpers --------------------
def _slot_key(payload: SlotInput) -> SlotKey:
    return SlotKey(payload.day_index, payload.meal, payload.category)


def _plan_payload(plan: Plan, **extra):
    data = plan.to_dict()
    data.update({
        "endDate": plan.end_date().isoformat(),
        "hasBrunch": plan.has_brunch,
        "dailyCategories": list(plan.daily_categories),
    })
    data.update(extra)
    return data


def _save(store: PlanStore, plan: Plan):
    store.save(plan)
    return _plan_payload(plan)


def _run_generation(generator: PlanGenerator, store: PlanStore):
    """Generate from the stored plan, read only once the generation lock is held."""
    if not _generation_lock.acquire(blocking=False):
        raise HTTPException(status_code=409, detail="A generation is already in progress")
    try:
        return generator.generate(store.load())
    except GenerationFailed as e:
        raise HTTPException(status_code=502, detail=e.message)
    finally:
        _generation_lock.release()


@app.exception_handler(InvalidSlot)
def _invalid_slot_handler(request, exc: InvalidSlot):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# -------------------- API: Plan --------------------
@app.get("/api/plan")
def api_get_plan(store: PlanStore = Depends(get_store), generator: PlanGenerator = Depends(get_generator)):
    plan = store.load()
    if not plan.days:
        # first visit: fill the grid once
        result = _run_generation(generator, store)
        return _plan_payload(result.plan, shortfall=result.shortfall)
    return _plan_payload(plan)


@app.post("/api/plan/generate")
def api_generate(store: PlanStore = Depends(get_store), generator: PlanGenerator = Depends(get_generator)):
    result = _run_generation(generator, store)
    return _plan_payload(result.plan, shortfall=result.shortfall, filled=result.filled)


@app.post("/api/plan/slots/regenerate")
def api_regenerate_slot(payload: SlotInput, store: PlanStore = Depends(get_store),
                        generator: PlanGenerator = Depends(get_generator)):
    key = _slot_key(payload)
    if not _generation_lock.acquire(blocking=False):
        raise HTTPException(status_code=409, detail="A generation is already in progress")
    try:
        new_plan = generator.regenerate_slot(store.load(), key)
    except GenerationFailed as e:
        raise HTTPException(status_code=502, detail=e.message)
    finally:
        _generation_lock.release()
    return _plan_payload(new_plan)


@app.post("/api/plan/locks/slot")
def api_toggle_slot_lock(payload: SlotInput, store: PlanStore = Depends(get_store)):
    plan = store.load().toggle_slot_lock(_slot_key(payload))
    return _save(store, plan)


@app.post("/api/plan/locks/day")
def api_toggle_day_lock(payload: DayInput, store: PlanStore = Depends(get_store)):
    plan = store.load().toggle_day_lock(payload.day_index)
    return _save(store, plan)


@app.post("/api/plan/locks/clear")
def api_unlock_all(store: PlanStore = Depends(get_store)):
    return _save(store, store.load().unlock_all())


@app.post("/api/plan/meals")
def api_set_meal_enabled(payload: MealToggleInput, store: PlanStore = Depends(get_store)):
    plan = store.load().set_meal_enabled(payload.day_index, payload.meal, payload.enabled)
    return _save(store, plan)


@app.post("/api/plan/servings")
def api_set_servings(payload: ServingsInput, store: PlanStore = Depends(get_store)):
    plan = store.load()
    key = _slot_key(payload)
    if plan.get(key) is None:
        raise HTTPException(status_code=404, detail="No recipe assigned to this slot")
    return _save(store, plan.set_selected_servings(key, payload.servings))


@app.put("/api/plan/settings")
def api_update_settings(payload: SettingsInput, store: PlanStore = Depends(get_store)):
    plan = store.load()
    if payload.categories is not None:
        plan = plan.set_categories(payload.categories)
    if payload.day_count is not None:
        plan = plan.resize_days(payload.day_count)
    if payload.start_date is not None:
        plan = plan.set_start_date(payload.start_date)
    logger.info("Plan settings updated: start=%s days=%d categories=%s",
                plan.start_date, plan.day_count, ",".join(plan.categories))
    return _save(store, plan)


# -------------------- API: Shopping List (JSON) --------------------
@app.get("/api/shopping-list")
def api_shopping_list(store: PlanStore = Depends(get_store)):
    plan = store.load()
    items = build_shopping_list(plan.days)
    return {"items": items, "count": len(items),
            "startDate": plan.start_date.isoformat(), "endDate": plan.end_date().isoformat()}
