"""
MongoDB connection helpers

`db` is None when DATABASE_URL / DATABASE_NAME are not set, so the API can
run entirely on in-memory data.
"""
import logging
import os

from pymongo import MongoClient

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

client = None
db = None

if DATABASE_URL and DATABASE_NAME:
    client = MongoClient(DATABASE_URL)
    db = client[DATABASE_NAME]
    logger.info(f"MongoDB configured: {DATABASE_NAME}")


