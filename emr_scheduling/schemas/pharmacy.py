from pydantic import BaseModel


class PharmacyMatchOut(BaseModel):
    name: str
    ncpdp: str
