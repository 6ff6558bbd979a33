from dataclasses import dataclass

from src.catalog.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    ObjectStorage,
)


@dataclass
class ApplicationDependencies:
    jwt_verify_service: JwtVerificationService
    jwt_generation_service: JwtGeneratorService
    database_service: DbSessionService
    object_storage: ObjectStorage
