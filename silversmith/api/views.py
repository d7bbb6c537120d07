"""
Silversmith API ViewSets.
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from silversmith.codec import decode
from silversmith.conf import get_catalog, get_setting
from silversmith.exceptions import SilversmithError
from silversmith.models import Order, Product, ProductionBatch
from silversmith.ranges import expand_range
from silversmith.services import send_to_production

from .serializers import (
    BatchHoldSerializer,
    BatchMoveSerializer,
    DecodeSerializer,
    ExpandSerializer,
    OrderSerializer,
    ProductionBatchSerializer,
    ProductSerializer,
    SendToProductionSerializer,
)


def _error(exc: SilversmithError) -> Response:
    return Response({"error": exc.as_dict()}, status=status.HTTP_400_BAD_REQUEST)


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Product (read-only).

    list: List all active products
    retrieve: Get a specific product by SKU
    """

    permission_classes = [IsAuthenticated]
    queryset = Product.objects.filter(is_active=True).prefetch_related("variants")
    serializer_class = ProductSerializer
    lookup_field = "sku"


class OrderViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Order.

    list: List all orders
    create: Create an order with its items
    retrieve: Get a specific order
    send_to_production: Create production batches for the order
    """

    permission_classes = [IsAuthenticated]
    queryset = Order.objects.prefetch_related("items")
    serializer_class = OrderSerializer

    @action(detail=True, methods=["post"])
    def send_to_production(self, request, pk=None):
        """
        Send order lines to production.

        POST /api/silversmith/orders/{pk}/send_to_production/
        {
            "quantities": {"12": 3}  // optional, partial send
        }
        """
        order = self.get_object()
        serializer = SendToProductionSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = send_to_production(
                order,
                quantities=serializer.validated_data.get("quantities"),
                user=request.user,
            )
        except SilversmithError as e:
            return _error(e)

        return Response(
            {
                "status": result.order.status,
                "batches_created": len(result.batches),
                "batch_codes": [b.code for b in result.batches],
            },
            status=status.HTTP_201_CREATED,
        )


class ProductionBatchViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for ProductionBatch.

    list: List batches (filter with ?stage=casting)
    retrieve: Get a specific batch by UUID
    move: Move the whole batch or part of it to a later stage
    hold / release: Take the batch off the floor and back
    """

    permission_classes = [IsAuthenticated]
    queryset = ProductionBatch.objects.select_related("order")
    serializer_class = ProductionBatchSerializer
    lookup_field = "uuid"

    def get_queryset(self):
        qs = super().get_queryset()
        stage = self.request.query_params.get("stage")
        if stage:
            qs = qs.filter(current_stage=stage)
        return qs

    @action(detail=True, methods=["post"])
    def move(self, request, uuid=None):
        """
        Move a batch.

        POST /api/silversmith/batches/{uuid}/move/
        {
            "stage": "polishing",
            "quantity": 4  // optional, splits the batch
        }
        """
        batch = self.get_object()
        serializer = BatchMoveSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = batch.move_stage(
                serializer.validated_data["stage"],
                serializer.validated_data.get("quantity"),
                user=request.user,
            )
        except SilversmithError as e:
            return _error(e)

        return Response(
            {
                "outcome": result.outcome.value,
                "batch": ProductionBatchSerializer(result.batch).data,
                "remainder": (
                    ProductionBatchSerializer(result.remainder).data
                    if result.remainder
                    else None
                ),
            }
        )

    @action(detail=True, methods=["post"])
    def hold(self, request, uuid=None):
        """
        Put a batch on hold.

        POST /api/silversmith/batches/{uuid}/hold/
        {
            "reason": "Missing stones"  // optional
        }
        """
        batch = self.get_object()
        serializer = BatchHoldSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            batch.hold(serializer.validated_data["reason"], user=request.user)
        except SilversmithError as e:
            return _error(e)

        return Response({"on_hold": batch.on_hold, "reason": batch.on_hold_reason})

    @action(detail=True, methods=["post"])
    def release(self, request, uuid=None):
        """
        Release a held batch.

        POST /api/silversmith/batches/{uuid}/release/
        """
        batch = self.get_object()

        try:
            batch.release(user=request.user)
        except SilversmithError as e:
            return _error(e)

        return Response({"on_hold": batch.on_hold})


class CodecViewSet(viewsets.ViewSet):
    """
    Codec endpoints for scanners and order entry.

    decode: Resolve a scanned code into master, finish and stone
    expand: Expand a SKU range
    """

    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=["post"])
    def decode(self, request):
        """
        POST /api/silversmith/codec/decode/
        {"code": "DA050XCO"}
        """
        serializer = DecodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            ident = decode(serializer.validated_data["code"], get_catalog())
        except SilversmithError as e:
            return _error(e)

        return Response(ident.as_dict())

    @action(detail=False, methods=["post"])
    def expand(self, request):
        """
        POST /api/silversmith/codec/expand/
        {"token": "DA050-DA063"}
        """
        serializer = ExpandSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            skus = expand_range(
                serializer.validated_data["token"], limit=get_setting("RANGE_LIMIT")
            )
        except SilversmithError as e:
            return _error(e)

        return Response({"skus": skus, "count": len(skus)})
