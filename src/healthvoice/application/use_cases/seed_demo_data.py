"""Seed the demo accounts and appointments."""

import logging
from typing import Tuple

from ..ports.repositories.account_repo import AccountRepository
from ..ports.repositories.appointment_repo import AppointmentRepository
from ...core.constants import DEMO_ACCOUNTS, DEMO_APPOINTMENTS, DEMO_PASSWORD
from ...core.utils.crypto_utils import DEFAULT_ROUNDS, hash_password
from ...core.utils.datetime_utils import today_iso
from ...domain.entities.appointment import Appointment
from ...domain.entities.user import User
from ...domain.value_objects.appointment_id import AppointmentId

logger = logging.getLogger("healthvoice.seed")


class SeedDemoDataUseCase:
    """Insert demo rows that are missing; existing rows are left alone."""

    def __init__(
        self,
        account_repository: AccountRepository,
        appointment_repository: AppointmentRepository,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self._account_repository = account_repository
        self._appointment_repository = appointment_repository
        self._bcrypt_rounds = bcrypt_rounds

    async def execute(self) -> Tuple[int, int]:
        accounts = 0
        for row in DEMO_ACCOUNTS:
            if await self._account_repository.find_by_email(row["email"]):
                continue
            await self._account_repository.save(
                User(
                    user_id=row["user_id"],
                    name=row["name"],
                    email=row["email"],
                    role=row["role"],
                    password_hash=hash_password(DEMO_PASSWORD, rounds=self._bcrypt_rounds),
                )
            )
            accounts += 1

        today = today_iso()
        appointments = await self._appointment_repository.seed(
            [
                Appointment(
                    appointment_id=AppointmentId(row["appointment_id"]),
                    patient_id=row["patient_id"],
                    patient_name=row["patient_name"],
                    date=today,
                    time_slot=row["time_slot"],
                    symptoms_summary=row["symptoms_summary"],
                    doctor_id=row["doctor_id"],
                    status=row["status"],
                    notes=row["notes"],
                )
                for row in DEMO_APPOINTMENTS
            ]
        )
        logger.info("Seeded %d demo accounts and %d demo appointments", accounts, appointments)
        return accounts, appointments
