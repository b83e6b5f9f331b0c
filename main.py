import logging
from datetime import date
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES
from config import get_settings
from database import SessionLocal, init_db
from periods import resolve_period
from repositories import TransactionFilters
from schemas import (
    BudgetIn,
    BudgetOut,
    DashboardOut,
    GoalIn,
    GoalOut,
    GoalSummaryOut,
    GoalTransactionIn,
    GoalTransactionOut,
    GoalTransactionUpdate,
    GoalUpdate,
    MonthlyReportOut,
    TransactionIn,
    TransactionOut,
    TransactionUpdate,
    TransferIn,
    WalletIn,
    WalletOut,
    WalletUpdate,
)
from services import (
    BudgetService,
    DashboardService,
    GoalService,
    LinkService,
    NotFoundError,
    ReportService,
    TransactionService,
    WalletService,
    local_today,
    seed_defaults,
)

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Walletbook")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@app.on_event("startup")
def startup_event():
    init_db()
    if settings.seed_defaults:
        with SessionLocal() as db:
            seed_defaults(db)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # Services already rolled back and logged the traceback.
    logger.error(f"request_failed: path={request.url.path} error={type(exc).__name__}")
    return JSONResponse(status_code=500, content={"detail": "Operation did not complete"})


def not_found(exc: NotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc))


def rejected(detail: str) -> HTTPException:
    return HTTPException(status_code=409, detail=detail)


@app.get("/api/wallets", response_model=list[WalletOut])
def list_wallets(db: Session = Depends(get_db)):
    return WalletService(db).list_all()


@app.post("/api/wallets", response_model=WalletOut, status_code=201)
def create_wallet(payload: WalletIn, db: Session = Depends(get_db)):
    return WalletService(db).create(payload)


@app.get("/api/wallets/{wallet_id}", response_model=WalletOut)
def get_wallet(wallet_id: str, db: Session = Depends(get_db)):
    try:
        return WalletService(db).get(wallet_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc


@app.patch("/api/wallets/{wallet_id}", response_model=WalletOut)
def update_wallet(wallet_id: str, payload: WalletUpdate, db: Session = Depends(get_db)):
    wallet = WalletService(db).update(wallet_id, payload)
    if wallet is None:
        raise HTTPException(status_code=404, detail="Wallet not found")
    return wallet


@app.delete("/api/wallets/{wallet_id}")
def delete_wallet(wallet_id: str, db: Session = Depends(get_db)):
    service = WalletService(db)
    try:
        service.get(wallet_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    if not service.delete(wallet_id):
        raise rejected("Wallet still has transactions")
    return {"deleted": True}


@app.post("/api/wallets/transfer", response_model=list[TransactionOut], status_code=201)
def transfer_between_wallets(payload: TransferIn, db: Session = Depends(get_db)):
    try:
        outgoing, incoming = WalletService(db).transfer(payload)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    return [outgoing, incoming]


@app.get("/api/wallets/{wallet_id}/sufficient")
def wallet_covers_amount(
    wallet_id: str, amount: int = Query(..., ge=0), db: Session = Depends(get_db)
):
    try:
        wallet = WalletService(db).get(wallet_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    return {
        "wallet_id": wallet.id,
        "balance": wallet.current_balance,
        "amount": amount,
        "sufficient": TransactionService(db).has_sufficient_balance(wallet_id, amount),
    }


@app.get("/api/net-worth")
def net_worth(db: Session = Depends(get_db)):
    return {"balance": WalletService(db).net_worth()}


@app.get("/api/transactions")
def list_transactions(
    period: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    wallet_id: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
    db: Session = Depends(get_db),
):
    try:
        resolved = resolve_period(period, start, end, today=local_today())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    page = max(page, 1)
    limit = min(max(limit, 1), 100)
    filters = TransactionFilters(
        start_date=resolved.start if resolved else None,
        end_date=resolved.end if resolved else None,
        wallet_id=wallet_id,
    )
    items = TransactionService(db).list(
        limit=limit + 1, offset=(page - 1) * limit, filters=filters
    )
    has_more = len(items) > limit
    return {
        "items": [TransactionOut.model_validate(t) for t in items[:limit]],
        "page": page,
        "limit": limit,
        "has_more": has_more,
    }


@app.post("/api/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(payload: TransactionIn, db: Session = Depends(get_db)):
    try:
        return TransactionService(db).create(payload)
    except NotFoundError as exc:
        raise not_found(exc) from exc


@app.get("/api/transactions/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: str, db: Session = Depends(get_db)):
    try:
        return TransactionService(db).get(transaction_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc


@app.patch("/api/transactions/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: str, payload: TransactionUpdate, db: Session = Depends(get_db)
):
    service = TransactionService(db)
    try:
        service.get(transaction_id)
        txn = service.update(transaction_id, payload)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    if txn is None:
        raise rejected("Change would leave the linked goal with a negative balance")
    return txn


@app.delete("/api/transactions/{transaction_id}")
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    if not TransactionService(db).delete(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"deleted": True}


@app.get("/api/goals", response_model=list[GoalOut])
def list_goals(db: Session = Depends(get_db)):
    return GoalService(db).list_all()


@app.get("/api/goals/summary", response_model=GoalSummaryOut)
def goals_summary(db: Session = Depends(get_db)):
    return GoalService(db).summary()


@app.post("/api/goals", response_model=GoalOut, status_code=201)
def create_goal(payload: GoalIn, db: Session = Depends(get_db)):
    return GoalService(db).create(payload)


@app.get("/api/goals/{goal_id}", response_model=GoalOut)
def get_goal(goal_id: str, db: Session = Depends(get_db)):
    try:
        return GoalService(db).get(goal_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc


@app.patch("/api/goals/{goal_id}", response_model=GoalOut)
def update_goal(goal_id: str, payload: GoalUpdate, db: Session = Depends(get_db)):
    goal = GoalService(db).update(goal_id, payload)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@app.delete("/api/goals/{goal_id}")
def delete_goal(goal_id: str, db: Session = Depends(get_db)):
    if not GoalService(db).delete(goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return {"deleted": True}


@app.get("/api/goals/{goal_id}/transactions", response_model=list[GoalTransactionOut])
def goal_history(
    goal_id: str, page: int = 1, limit: int = 20, db: Session = Depends(get_db)
):
    service = GoalService(db)
    try:
        service.get(goal_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    limit = min(max(limit, 1), 100)
    return service.history(goal_id, limit=limit, offset=(max(page, 1) - 1) * limit)


@app.post(
    "/api/goals/{goal_id}/topup", response_model=GoalTransactionOut, status_code=201
)
def topup_goal(goal_id: str, payload: GoalTransactionIn, db: Session = Depends(get_db)):
    service = GoalService(db)
    try:
        service.get(goal_id)
        gtx = service.topup(goal_id, payload)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    return gtx


@app.post(
    "/api/goals/{goal_id}/withdraw", response_model=GoalTransactionOut, status_code=201
)
def withdraw_goal(
    goal_id: str, payload: GoalTransactionIn, db: Session = Depends(get_db)
):
    service = GoalService(db)
    try:
        service.get(goal_id)
        gtx = service.withdraw(goal_id, payload)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    if gtx is None:
        raise rejected("Withdrawal exceeds the goal balance")
    return gtx


@app.patch("/api/goal-transactions/{gtx_id}", response_model=GoalTransactionOut)
def update_goal_transaction(
    gtx_id: str, payload: GoalTransactionUpdate, db: Session = Depends(get_db)
):
    service = GoalService(db)
    try:
        service.get_transaction(gtx_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc
    gtx = service.update_transaction(gtx_id, payload)
    if gtx is None:
        raise rejected("Change would leave the goal with a negative balance")
    return gtx


@app.delete("/api/goal-transactions/{gtx_id}")
def delete_goal_transaction(gtx_id: str, db: Session = Depends(get_db)):
    if not GoalService(db).delete_transaction(gtx_id):
        raise HTTPException(status_code=404, detail="Goal transaction not found")
    return {"deleted": True}


@app.get("/api/categories")
def list_categories():
    return {"expense": EXPENSE_CATEGORIES, "income": INCOME_CATEGORIES}


@app.get("/api/budgets", response_model=list[BudgetOut])
def list_budgets(db: Session = Depends(get_db)):
    return BudgetService(db).list_with_progress()


@app.put("/api/budgets")
def set_budget(payload: BudgetIn, db: Session = Depends(get_db)):
    budget = BudgetService(db).set_limit(payload)
    return {"id": budget.id, "category": budget.category, "monthly_limit": budget.monthly_limit}


@app.delete("/api/budgets/{category}")
def delete_budget(category: str, db: Session = Depends(get_db)):
    if not BudgetService(db).delete(category):
        raise HTTPException(status_code=404, detail="Budget not found")
    return {"deleted": True}


@app.get("/api/dashboard", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db)):
    # Recent transactions are ORM rows; validate them by attribute.
    return DashboardOut.model_validate(DashboardService(db).build())


@app.get("/api/reports/monthly", response_model=MonthlyReportOut)
def monthly_report(
    month: Optional[int] = None, year: Optional[int] = None, db: Session = Depends(get_db)
):
    today: date = local_today()
    try:
        return ReportService(db).monthly_report(month or today.month, year or today.year)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/api/admin/backfill-links")
def backfill_links(db: Session = Depends(get_db)):
    return {"linked": LinkService(db).backfill()}


def main():
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
