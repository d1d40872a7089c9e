# presurvey/api/routes_basic.py
import time

from fastapi import APIRouter

from presurvey import config

router = APIRouter()


@router.get("/")
def root():
    return {"message": "Moving pre-survey backend is running"}


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/ping")
def ping():
    return {"ok": True, "ts": int(time.time() * 1000)}


@router.get("/api/env-status")
def env_status():
    """
    Qué integraciones están en modo live (hay credencial) y cuáles en mock.
    Nunca regresa los valores de las keys.
    """
    return {
        "openai": bool(config.OPENAI_API_KEY),
        "google": bool(config.GOOGLE_API_KEY),
        "tomtom": bool(config.TOMTOM_API_KEY),
        "tfl": bool(config.TFL_APP_ID and config.TFL_APP_KEY),
    }
