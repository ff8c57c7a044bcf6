"""API routers package."""

from taskmarket.api import admin, company, deps, events, tasks, users, worker

__all__ = [
    "admin",
    "company",
    "deps",
    "events",
    "tasks",
    "users",
    "worker",
]
