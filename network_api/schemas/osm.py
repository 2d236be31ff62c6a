from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OsmSyncResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Sync completed"
    updated_stores: int = Field(default=0, alias="updatedStores")
    total_businesses: int = Field(default=0, alias="totalBusinesses")
