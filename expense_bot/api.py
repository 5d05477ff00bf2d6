import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException

from expense_bot.config import settings
from expense_bot.errors import ExpenseFormatError, StoreUnavailableError
from expense_bot.models import ExpenseRequest, ExpenseResponse, ReportResponse
from expense_bot.service import ExpenseService

logger = logging.getLogger(__name__)

app = FastAPI(title="Expense Sheet API", version="1.0.0")


@lru_cache
def get_service() -> ExpenseService:
    return ExpenseService.from_settings(settings)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/expense", response_model=ExpenseResponse)
def add_expense(req: ExpenseRequest, service: ExpenseService = Depends(get_service)):
    try:
        expense, sheet_name = service.add_expense(req.text, req.date or service.today())
    except ExpenseFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreUnavailableError as e:
        logger.exception("Failed to record expense")
        raise HTTPException(status_code=503, detail=str(e))
    return ExpenseResponse(
        status="success",
        message=f"Expense of {expense.amount} added to sheet {sheet_name}",
        sheet=sheet_name,
        expense=expense,
    )


@app.get("/report/weekly", response_model=ReportResponse)
def weekly_report(service: ExpenseService = Depends(get_service)):
    try:
        return ReportResponse(text=service.weekly_report())
    except StoreUnavailableError as e:
        logger.exception("Failed to build weekly report")
        raise HTTPException(status_code=503, detail=str(e))


@app.get("/report/monthly", response_model=ReportResponse)
def monthly_report(service: ExpenseService = Depends(get_service)):
    try:
        return ReportResponse(text=service.monthly_report())
    except StoreUnavailableError as e:
        logger.exception("Failed to build monthly report")
        raise HTTPException(status_code=503, detail=str(e))


def main():
    import uvicorn

    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
