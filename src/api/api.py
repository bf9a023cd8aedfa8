import logging
from contextlib import asynccontextmanager
from time import perf_counter
from typing import Annotated, AsyncGenerator, Awaitable, Callable
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel
from sqlalchemy.orm import sessionmaker

from api.dependencies import get_bill_repository, get_transaction_repository
from config import config
from db.db import create_db_engine
from db.repositories import PurchaseBillRepository, TransactionLineRepository
from domain.balance import build_ledger_view, entries_for_account
from domain.bill import BillId, PurchaseBill
from domain.ledger import AccountId, LedgerView, TransactionLine
from domain.tax import TaxField, TaxFieldSet, resolve

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    engine = create_db_engine(db_file=config().database_file)
    fastapi_app.state.sessionmaker = sessionmaker(engine)
    yield
    engine.dispose()


app = FastAPI(lifespan=lifespan)


@app.middleware("http")
async def log_process_time(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    start_time = perf_counter()
    response = await call_next(request)
    process_time = perf_counter() - start_time
    logger.info("Request time: %s %s: %.4fs", request.method, request.url, process_time)
    return response


class ResolveRequest(BaseModel):
    fields: TaxFieldSet
    edited_field: TaxField


class UpdateBillRequest(BaseModel):
    bill: PurchaseBill
    edited_field: TaxField


@app.post("/transactions")
def create_transaction(
    line: TransactionLine, tr: Annotated[TransactionLineRepository, Depends(get_transaction_repository)]
) -> TransactionLine:
    return tr.create(line)


@app.get("/accounts/{account_id}/ledger")
def get_account_ledger(
    account_id: str, tr: Annotated[TransactionLineRepository, Depends(get_transaction_repository)]
) -> LedgerView:
    account = AccountId(account_id)
    return build_ledger_view(entries_for_account(tr.list_for_account(account), account))


@app.post("/tax/resolve")
def resolve_tax(body: ResolveRequest) -> TaxFieldSet:
    return resolve(body.fields, body.edited_field)


@app.post("/bills")
def create_bill(bill: PurchaseBill, br: Annotated[PurchaseBillRepository, Depends(get_bill_repository)]) -> PurchaseBill:
    # Stored bills always carry a consistent tax section.
    consistent = bill.model_copy(update={"tax": resolve(bill.tax, TaxField.TAXABLE_VALUE)})
    return br.create(consistent)


@app.get("/bills")
def list_bills(br: Annotated[PurchaseBillRepository, Depends(get_bill_repository)]) -> list[PurchaseBill]:
    return br.list()


@app.get("/bills/{bill_id}")
def get_bill(bill_id: UUID, br: Annotated[PurchaseBillRepository, Depends(get_bill_repository)]) -> PurchaseBill:
    bill = br.get(BillId(bill_id))
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@app.post("/bills/{bill_id}/pay")
def pay_bill(bill_id: UUID, br: Annotated[PurchaseBillRepository, Depends(get_bill_repository)]) -> PurchaseBill:
    bill = br.mark_paid(BillId(bill_id))
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@app.put("/bills/{bill_id}")
def update_bill(
    bill_id: UUID, body: UpdateBillRequest, br: Annotated[PurchaseBillRepository, Depends(get_bill_repository)]
) -> PurchaseBill:
    updated = body.bill.model_copy(update={"id": BillId(bill_id), "tax": resolve(body.bill.tax, body.edited_field)})
    bill = br.update(updated)
    if bill is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@app.delete("/bills/{bill_id}")
def delete_bill(bill_id: UUID, br: Annotated[PurchaseBillRepository, Depends(get_bill_repository)]) -> dict[str, bool]:
    if not br.delete(BillId(bill_id)):
        raise HTTPException(status_code=404, detail="Bill not found")
    return {"success": True}
