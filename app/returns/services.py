"""
Return request workflow and return refunds.

ReturnService drives a ReturnRequest through review and refunds it:

    create_return_request   customer opens a pending return
    merchant_review         merchant approves (refund follows) or rejects
    admin_escalate          pending or rejected return goes to an admin
    admin_approve_refund    admin approves a rejected or escalated return
    process_return_refund   refund item price x quantity, restock, once
    retry_refund            refund an approved return whose refund failed

An approval is committed before its refund runs. If the refund fails the
return stays approved for follow-up and RefundProcessingError is raised.

Usage:
    from returns.services import ReturnService

    return_request = ReturnService.merchant_review(return_id, merchant_id, "approved")
    assert return_request.status == ReturnStatus.REFUNDED
"""

from __future__ import annotations

from django.db import DatabaseError
from django.db.models import F
from django.utils import timezone
from django_fsm import can_proceed

from core.exceptions import BaseApplicationError, PermissionDeniedError, ValidationError
from core.services import BaseService
from orders.exceptions import OrderItemNotFoundError
from orders.models import Inventory, OrderItem, PaymentStatus
from payments.adapters import GatewayAdapterMixin
from returns.exceptions import InvalidReturnStateError, RefundProcessingError, ReturnNotFoundError
from returns.models import REFUNDABLE_STATUSES, ReturnRequest, ReturnStatus
from toolkit.services import AuditService

DECISION_APPROVED = "approved"
DECISION_REJECTED = "rejected"
MERCHANT_DECISIONS = (DECISION_APPROVED, DECISION_REJECTED)

DEFAULT_LIST_LIMIT = 50


class ReturnService(GatewayAdapterMixin, BaseService):
    """
    Return review and refund.

    Error Handling:
        - ReturnNotFoundError / OrderItemNotFoundError: Unknown id (404)
        - PermissionDeniedError: Merchant reviewing another merchant's item (403)
        - InvalidReturnStateError: Action not allowed from the current status (400)
        - RefundProcessingError: Gateway refused the refund, or it could not
          be saved (502)
    """

    @classmethod
    def create_return_request(
        cls,
        order_item_id,
        customer_id,
        reason: str,
        description: str = "",
    ) -> ReturnRequest:
        if not OrderItem.objects.filter(id=order_item_id).exists():
            raise OrderItemNotFoundError(f"Order item {order_item_id} not found")

        return_request = ReturnRequest.objects.create(
            order_item_id=order_item_id,
            customer_id=str(customer_id),
            reason=reason,
            description=description or "",
        )

        cls.get_logger().info(
            f"Return request created: {return_request.id}",
            extra={"return_id": str(return_request.id), "order_item_id": order_item_id},
        )
        return return_request

    @classmethod
    def merchant_review(cls, return_id, merchant_id, decision: str, notes: str = "") -> ReturnRequest:
        """
        Record the merchant's decision on a pending return.

        The decision is committed first. An approval then refunds the return
        in its own transaction; if that fails the return stays
        MERCHANT_APPROVED and RefundProcessingError propagates.

        Args:
            return_id: ReturnRequest id
            merchant_id: Merchant making the decision; must own the item
            decision: "approved" or "rejected"
            notes: Merchant's notes

        Returns:
            The ReturnRequest (REFUNDED after an approval that found a
            completed payment, else MERCHANT_APPROVED / MERCHANT_REJECTED)
        """
        if decision not in MERCHANT_DECISIONS:
            raise ValidationError(
                "Valid decision required (approved/rejected)",
                details={"decision": decision},
            )

        with cls.atomic():
            return_request = cls._lock(return_id)

            if str(return_request.order_item.merchant_id) != str(merchant_id):
                raise PermissionDeniedError(
                    "Merchants can only review returns of their own items",
                    details={"return_id": str(return_request.id)},
                )

            transition = (
                return_request.merchant_approve
                if decision == DECISION_APPROVED
                else return_request.merchant_reject
            )
            cls._check_transition(return_request, transition, f"merchant {decision}")
            transition(notes)
            return_request.save()

        cls.get_logger().info(
            f"Merchant {decision} return {return_request.id}",
            extra={"return_id": str(return_request.id), "merchant_id": str(merchant_id)},
        )

        if decision == DECISION_APPROVED:
            cls.process_return_refund(return_request.id)

        return ReturnRequest.objects.get(id=return_request.id)

    @classmethod
    def admin_escalate(cls, return_id, admin_id, notes: str = "") -> ReturnRequest:
        """Move a pending or merchant-rejected return to admin review."""
        with cls.atomic():
            return_request = cls._lock(return_id)
            cls._check_transition(return_request, return_request.escalate, "escalate")

            return_request.escalate(admin_id, notes)
            return_request.save()

            AuditService.record(
                action="return.escalated",
                target_type="return",
                target_id=return_request.id,
                actor_id=admin_id,
                details={"notes": notes},
            )

        cls.get_logger().info(f"Return {return_request.id} escalated to admin review")
        return return_request

    @classmethod
    def admin_approve_refund(cls, return_id, admin_id) -> ReturnRequest:
        """
        Approve an escalated or merchant-rejected return and refund it.

        The approval and its audit record are committed before the refund,
        so a failed refund leaves the return ADMIN_APPROVED.

        Returns:
            The refunded ReturnRequest
        """
        with cls.atomic():
            return_request = cls._lock(return_id)
            cls._check_transition(return_request, return_request.admin_approve, "approve")

            return_request.admin_approve(admin_id)
            return_request.save()

            AuditService.record(
                action="return.refund_approved",
                target_type="return",
                target_id=return_request.id,
                actor_id=admin_id,
                details={"order_item_id": return_request.order_item_id},
            )

        cls.process_return_refund(return_request.id, admin_id=admin_id)
        return ReturnRequest.objects.get(id=return_request.id)

    @classmethod
    def retry_refund(cls, return_id, admin_id) -> ReturnRequest:
        """
        Run the refund again for an approved return whose refund failed.

        Raises:
            ReturnNotFoundError: Unknown return
            InvalidReturnStateError: Return is not approved or refunded
            RefundProcessingError: The refund failed again
        """
        if not ReturnRequest.objects.filter(id=return_id).exists():
            raise ReturnNotFoundError(f"Return request {return_id} not found")

        cls.get_logger().info(
            f"Retrying refund for return {return_id}",
            extra={"return_id": str(return_id), "admin_id": str(admin_id)},
        )
        cls.process_return_refund(return_id, admin_id=admin_id)
        return ReturnRequest.objects.get(id=return_id)

    @classmethod
    def process_return_refund(cls, return_id, admin_id=None) -> ReturnRequest | None:
        """
        Refund an approved return and restock its item.

        Already refunded returns are left as they are. A missing return or
        a missing completed payment is logged and nothing changes.

        Args:
            return_id: ReturnRequest id
            admin_id: Admin who triggered the refund, for the audit trail

        Raises:
            InvalidReturnStateError: Return is not approved
            RefundProcessingError: Gateway or database failure
        """
        logger = cls.get_logger()
        adapter = cls.get_gateway_adapter()

        try:
            with cls.atomic():
                return_request = (
                    ReturnRequest.objects.select_for_update()
                    .select_related("order_item__order")
                    .filter(id=return_id)
                    .first()
                )
                if return_request is None:
                    logger.warning(f"Return {return_id} not found, skipping refund")
                    return None

                if return_request.is_refunded:
                    logger.info(f"Return {return_request.id} already refunded")
                    return return_request

                if return_request.status not in REFUNDABLE_STATUSES:
                    raise InvalidReturnStateError(
                        f"Cannot refund return with status: {return_request.status}",
                        details={"return_id": str(return_request.id), "status": return_request.status},
                    )

                item = return_request.order_item
                payment = item.order.payments.filter(status=PaymentStatus.COMPLETED).first()
                if payment is None:
                    logger.warning(
                        f"No completed payment for return {return_request.id}, skipping refund",
                        extra={"return_id": str(return_request.id), "order_id": item.order_id},
                    )
                    return return_request

                amount = item.line_total
                refund_reference = ""
                if payment.transaction_reference:
                    try:
                        refund = adapter.create_refund(
                            payment.transaction_reference,
                            amount=amount,
                            merchant_note=f"Return {return_request.id}",
                        )
                    except BaseApplicationError as e:
                        raise RefundProcessingError(
                            f"Refund failed for return {return_request.id}: {e.message}",
                            details={
                                "return_id": str(return_request.id),
                                "upstream_code": e.error_code,
                            },
                        ) from e
                    refund_reference = refund.id
                    logger.info(
                        f"Refund processed: {refund_reference} for return {return_request.id}",
                        extra={"return_id": str(return_request.id), "amount": str(amount)},
                    )

                return_request.mark_refunded(refund_reference, amount)
                return_request.save()

                restocked = Inventory.objects.for_item(item).update(
                    quantity=F("quantity") + item.quantity,
                    updated_at=timezone.now(),
                )
                if not restocked:
                    logger.warning(
                        f"No inventory row to restock for return {return_request.id}",
                        extra={"order_item_id": item.id, "product_id": item.product_id},
                    )

                if admin_id:
                    AuditService.record(
                        action="return.refunded",
                        target_type="return",
                        target_id=return_request.id,
                        actor_id=admin_id,
                        details={
                            "order_item_id": item.id,
                            "refund_amount": str(amount),
                            "quantity_restocked": item.quantity,
                        },
                    )
        except DatabaseError as e:
            logger.exception(f"Failed to record refund for return {return_id}")
            raise RefundProcessingError(
                f"Failed to record refund for return {return_id}",
                details={"return_id": str(return_id)},
            ) from e

        return return_request

    @classmethod
    def list_returns(cls, status: str | None = None, merchant_id=None, limit: int = DEFAULT_LIST_LIMIT):
        """Most recent returns first, optionally filtered by status or merchant."""
        queryset = ReturnRequest.objects.select_related("order_item").order_by("-created_at")
        if status:
            queryset = queryset.filter(status=status)
        if merchant_id:
            queryset = queryset.filter(order_item__merchant_id=merchant_id)
        return queryset[:limit]

    @classmethod
    def _lock(cls, return_id) -> ReturnRequest:
        return_request = (
            ReturnRequest.objects.select_for_update()
            .select_related("order_item")
            .filter(id=return_id)
            .first()
        )
        if return_request is None:
            raise ReturnNotFoundError(f"Return request {return_id} not found")
        return return_request

    @classmethod
    def _check_transition(cls, return_request: ReturnRequest, transition, action: str) -> None:
        if not can_proceed(transition):
            raise InvalidReturnStateError(
                f"Cannot {action} return with status: {return_request.status}",
                details={"return_id": str(return_request.id), "status": return_request.status},
            )
