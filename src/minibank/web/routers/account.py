from fastapi import APIRouter

from minibank.core.modules.account.models import BalanceView, TransactionListView
from minibank.web.deps import AppDep, IdentityDep
from minibank.web.openapi import ErrorResponse

router = APIRouter(tags=["account"])


@router.get(
    "/balance",
    summary="Get balance",
    description="Balance of the authenticated user's account. Users without an account have a zero balance.",
    operation_id="getBalance",
    responses={
        200: {"description": "Current balance"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_balance(app: AppDep, identity: IdentityDep) -> BalanceView:
    return await app.get_balance(identity)


@router.get(
    "/transactions",
    summary="List recent transactions",
    description="Up to 20 most recent transactions of the authenticated user, newest first.",
    operation_id="listTransactions",
    responses={
        200: {"description": "Recent transactions"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_transactions(app: AppDep, identity: IdentityDep) -> TransactionListView:
    return await app.get_transactions(identity)
