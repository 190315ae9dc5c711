"""GET /v1/customers - customer directory lookup for the charge form"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from edunexia_charges.api.v1.schemas import CustomerListResponse, CustomerSchema
from edunexia_charges.api.dependencies import get_customer_client
from edunexia_charges.domain.exceptions import GatewayError
from edunexia_charges.infrastructure.clients.customers import CustomerDirectoryClient

router = APIRouter()


@router.get("/customers", response_model=CustomerListResponse)
async def list_customers(
    name: Optional[str] = Query(None, description="Name filter"),
    cpf_cnpj: Optional[str] = Query(None, description="CPF/CNPJ filter"),
    directory: CustomerDirectoryClient = Depends(get_customer_client),
):
    try:
        customers = await directory.list_customers(name=name, cpf_cnpj=cpf_cnpj)
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return CustomerListResponse(
        customers=[CustomerSchema(id=c.id, name=c.name, cpf_cnpj=c.cpf_cnpj) for c in customers]
    )
