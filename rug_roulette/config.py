from dotenv import load_dotenv

import os

load_dotenv()

BROADCAST_URL = os.getenv("BROADCAST_URL", "memory://")
POOL_CHANNEL = os.getenv("POOL_CHANNEL", "rug_pool")

STARTING_BALANCE = float(os.getenv("STARTING_BALANCE", "1000"))

MIN_STAKE = float(os.getenv("MIN_STAKE", "1"))
MAX_STAKE = float(os.getenv("MAX_STAKE", "100"))
MAX_PLAYERS = int(os.getenv("MAX_PLAYERS", "10"))

# first pool after start-up runs a fixed 5 minutes, later ones 2-7 minutes
FIRST_POOL_SECONDS = int(os.getenv("FIRST_POOL_SECONDS", "300"))
POOL_SECONDS_MIN = int(os.getenv("POOL_SECONDS_MIN", "120"))
POOL_SECONDS_SPAN = int(os.getenv("POOL_SECONDS_SPAN", "300"))

TICK_SECONDS = float(os.getenv("TICK_SECONDS", "1"))
NEW_POOL_DELAY_SECONDS = float(os.getenv("NEW_POOL_DELAY_SECONDS", "5"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "5000"))
