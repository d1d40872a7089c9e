# presurvey/config.py

import os

from dotenv import load_dotenv

# Permite un .env local en desarrollo
load_dotenv()


# ---------- Credenciales de APIs externas ----------
# Sin key, cada endpoint responde en modo sandbox/mock.

GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
TOMTOM_API_KEY = os.getenv("TOMTOM_API_KEY")
TFL_APP_ID = os.getenv("TFL_APP_ID")
TFL_APP_KEY = os.getenv("TFL_APP_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# ---------- Servidor ----------

HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "10"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------- URLs externas ----------

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
GOOGLE_DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
GOOGLE_STREETVIEW_URL = "https://maps.googleapis.com/maps/api/streetview"
GOOGLE_STATICMAP_URL = "https://maps.googleapis.com/maps/api/staticmap"
TOMTOM_INCIDENTS_URL = "https://api.tomtom.com/traffic/services/5/incidentDetails"
TFL_DISRUPTION_URL = "https://api.tfl.gov.uk/Road/All/Disruption"
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

# ---------- Geocoder sandbox ----------

SANDBOX_CENTER_LAT = 51.509   # centro de Londres
SANDBOX_CENTER_LNG = -0.118

# Centros usados por /api/intake en modo sandbox_text
SANDBOX_DEPOT_CENTER = (51.472, -0.142)
SANDBOX_CUSTOMER_CENTER = (51.515, -0.141)

# ---------- Estimador de ruta mock ----------

EARTH_RADIUS_KM = 6371.0
MOCK_AVG_SPEED_KMH = 25.0
MIN_ETA_MINUTES = 5            # overhead mínimo de despacho

# Factor de tráfico [low, high)
JITTER_COORDS = (0.9, 1.3)     # ruta por coordenadas libres
JITTER_IDS = (0.85, 1.35)      # ruta por ids del directorio

# ETA < umbral -> "Leave now"
LEAVE_NOW_THRESHOLD_MIN = int(os.getenv("LEAVE_NOW_THRESHOLD_MIN", "90"))

# ---------- Tarifas (/api/metrics) ----------

CURRENT_RATE = 95.0
COMPETITOR_AVG_RATE = 88.5
HIGH_DEMAND_INDEX = 70

# ---------- Incidentes ----------

DEFAULT_INCIDENT_RADIUS_KM = 5.0
# Bounding box aproximado de Londres para decidir si vale la pena ir a TfL
LONDON_BBOX = {"lat_min": 51.28, "lat_max": 51.7, "lng_min": -0.5, "lng_max": 0.3}
TFL_MAX_ITEMS = 100
