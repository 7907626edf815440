from typing import Annotated

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.database.database import get_store
from app.services.reference import ReferenceData, get_reference_data
from app.store.interfaces import DocumentStore

StoreDep = Annotated[DocumentStore, Depends(get_store)]
ReferenceDep = Annotated[ReferenceData, Depends(get_reference_data)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
