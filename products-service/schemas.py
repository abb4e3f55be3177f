import math
from datetime import datetime
from typing import Annotated, Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, PlainValidator, confloat, constr
from pydantic_core import PydanticCustomError

# Nom obligatoire: chaîne stricte, espaces retirés, au moins 6 caractères
ProductName = constr(strip_whitespace=True, min_length=6, strict=True)

# Prix: nombre strict (pas de chaîne), fini et > 0
ProductPrice = confloat(strict=True, gt=0, allow_inf_nan=False)


def _to_number(value: Any) -> Union[int, float]:
    """Convertit le paramètre de chemin en nombre, rejette tout ce qui n'en est pas un."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise PydanticCustomError("id_not_a_number", "id must be a number")
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            raise PydanticCustomError("id_not_a_number", "id must be a number") from None
    if isinstance(value, float):
        if math.isnan(value):
            raise PydanticCustomError("id_not_a_number", "id must be a number")
        if value.is_integer():
            return int(value)
    return value


ProductId = Annotated[Union[int, float], PlainValidator(_to_number)]


class ProductFilter(BaseModel):
    name: str = ""  # Absent = chaîne vide = aucun filtre


class ProductCreate(BaseModel):
    name: ProductName
    price: ProductPrice


class ProductUpdate(BaseModel):
    name: ProductName
    price: Optional[ProductPrice] = None  # Absent (ou null) = prix inchangé


class ProductIdParam(BaseModel):
    id: ProductId


def parse_product_id(raw: str) -> Union[int, float]:
    """Valide le paramètre :id; lève ValidationError("id must be a number") sinon."""
    return ProductIdParam(id=raw).id


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ValidationIssue(BaseModel):
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    message: str
    issues: Optional[List[ValidationIssue]] = None
