from typing import Annotated, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from db.repositories import PurchaseBillRepository, TransactionLineRepository


def get_session(request: Request) -> Generator[Session, None, None]:
    with request.app.state.sessionmaker() as session:
        yield session


def get_transaction_repository(session: Annotated[Session, Depends(get_session)]) -> TransactionLineRepository:
    return TransactionLineRepository(session)


def get_bill_repository(session: Annotated[Session, Depends(get_session)]) -> PurchaseBillRepository:
    return PurchaseBillRepository(session)
