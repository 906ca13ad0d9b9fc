# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

import os
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
load_dotenv()

# Record store for every collection (vessels, containers, tally reports, work orders, resources, users)
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:

    raise ValueError("DATABASE_URL not found in .env file")

engine = create_engine(
    DATABASE_URL,

    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},

    pool_pre_ping=True

)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    Request-scoped session. Every operation reads a full collection,
    computes in memory and writes back inside this one session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
