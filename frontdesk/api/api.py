from fastapi import APIRouter
from frontdesk.api.v1 import auth, doctors, patients, appointments, queue

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(queue.router, prefix="/queue", tags=["queue"])
