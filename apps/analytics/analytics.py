"""
Analytics Module
=================

This module provides the scan analytics shown on a card owner's dashboard.
It aggregates scan events of the owner's cards into windowed counts,
breakdowns by scan method and device class, a daily time series and a
ranking of the most scanned cards.

Classes:
    AnalyticsQueries: Static methods for analytics queries.

Example:
    Getting the last week's report::

        from apps.analytics.analytics import AnalyticsQueries

        report = AnalyticsQueries.scan_report(owner_id=user.id, time_range='7days')
        print(f"{report['total_scans']} scans, {report['qr_scans']} via QR")

Note:
    This module is read-only and doesn't modify any data. Every query is
    scoped to the cards of a single owner.
"""

from datetime import timedelta

from django.db.models import Count, Q
from django.db.models.functions import TruncDate
from django.utils import timezone

from apps.cards.models import Card, ScanEvent, ScanType, DeviceType


DEFAULT_TIME_RANGE = '30days'

WINDOW_DAYS = {
    '7days': 7,
    '30days': 30,
    '90days': 90,
}

TOP_CARDS_LIMIT = 5


def _percentage(count, total):
    """Whole-number share of total; 0 when there is nothing to share."""
    if total == 0:
        return 0
    return int(round(count / total * 100))


class AnalyticsQueries:
    """
    Scan analytics for a card owner.

    Methods:
        normalize_time_range: Map a requested window onto a supported one.
        window_start: First instant included in a window.
        scan_report: Full dashboard report for one owner and window.

    Note:
        All methods return plain dictionaries or lists, not Django objects,
        making them suitable for JSON serialization in API responses.
    """

    @staticmethod
    def normalize_time_range(time_range):
        """Return time_range if supported, otherwise the 30 day default."""
        if time_range == 'year' or time_range in WINDOW_DAYS:
            return time_range
        return DEFAULT_TIME_RANGE

    @staticmethod
    def window_start(time_range, now=None):
        """
        Compute the start of a reporting window.

        Day windows subtract whole days from now. The year window moves
        back one calendar year, so 29 February maps onto 28 February.

        Args:
            time_range (str): '7days', '30days', '90days' or 'year'.
                Anything else is treated as '30days'.
            now (datetime, optional): Reference instant. Defaults to
                timezone.now().

        Returns:
            datetime: Aware datetime of the window start.
        """
        if now is None:
            now = timezone.now()

        time_range = AnalyticsQueries.normalize_time_range(time_range)

        if time_range == 'year':
            try:
                return now.replace(year=now.year - 1)
            except ValueError:
                return now.replace(year=now.year - 1, day=28)

        return now - timedelta(days=WINDOW_DAYS[time_range])

    @staticmethod
    def scan_report(owner_id, time_range=DEFAULT_TIME_RANGE, now=None):
        """
        Aggregate an owner's cards and their scans within a window.

        Args:
            owner_id (UUID): The card owner's unique identifier.
            time_range (str, optional): Reporting window, see window_start.
            now (datetime, optional): Reference instant for the window.

        Returns:
            dict: A dictionary containing:
                - time_range (str): The window actually applied.
                - start_date (datetime): Start of the window.
                - total_cards (int): All cards of the owner.
                - new_cards (int): Cards created within the window.
                - total_scans, qr_scans, nfc_scans (int): Scan counts in the window.
                - scan_methods (list[dict]): {method, count, percentage} for QR and NFC.
                - device_types (list[dict]): {device, count, percentage} per device class.
                - scan_activity (list[dict]): {date, count} for each day with
                  at least one scan, oldest first.
                - top_cards (list[dict]): Up to five {id, name, scans},
                  most scanned first, ties by card id.

        Example:
            Percentages are whole numbers and 0 when nothing was scanned::

                report = AnalyticsQueries.scan_report(user.id, '7days')
                for method in report['scan_methods']:
                    print(f"{method['method']}: {method['percentage']}%")
        """
        time_range = AnalyticsQueries.normalize_time_range(time_range)
        start_date = AnalyticsQueries.window_start(time_range, now=now)

        cards = Card.objects.filter(owner_id=owner_id)
        scans = ScanEvent.objects.filter(card__owner_id=owner_id, created_at__gte=start_date)

        card_counts = cards.aggregate(
            total=Count('id'),
            new=Count('id', filter=Q(created_at__gte=start_date)),
        )

        scan_counts = scans.aggregate(
            total=Count('id'),
            qr=Count('id', filter=Q(scan_type=ScanType.QR)),
            nfc=Count('id', filter=Q(scan_type=ScanType.NFC)),
        )
        total_scans = scan_counts['total']

        # NFC takes the complement so the two shares always add up to 100
        qr_percentage = _percentage(scan_counts['qr'], total_scans)
        nfc_percentage = 100 - qr_percentage if total_scans else 0

        scan_methods = [
            {
                'method': 'QR',
                'count': scan_counts['qr'],
                'percentage': qr_percentage,
            },
            {
                'method': 'NFC',
                'count': scan_counts['nfc'],
                'percentage': nfc_percentage,
            },
        ]

        # Device breakdown
        by_device = dict(
            scans.values_list('device_type').annotate(count=Count('id')).order_by()
        )
        device_types = [
            {
                'device': device,
                'count': by_device.get(device, 0),
                'percentage': _percentage(by_device.get(device, 0), total_scans),
            }
            for device in DeviceType.values
        ]

        # Daily series, only days that have scans
        scan_activity = [
            {'date': row['day'], 'count': row['count']}
            for row in (
                scans
                .annotate(day=TruncDate('created_at'))
                .values('day')
                .annotate(count=Count('id'))
                .order_by('day')
            )
        ]

        top_cards = [
            {'id': card.id, 'name': card.name, 'scans': card.scans}
            for card in (
                cards
                .annotate(scans=Count(
                    'scan_events',
                    filter=Q(scan_events__created_at__gte=start_date),
                ))
                .order_by('-scans', 'id')[:TOP_CARDS_LIMIT]
            )
        ]

        return {
            'time_range': time_range,
            'start_date': start_date,
            'total_cards': card_counts['total'],
            'new_cards': card_counts['new'],
            'total_scans': total_scans,
            'qr_scans': scan_counts['qr'],
            'nfc_scans': scan_counts['nfc'],
            'scan_methods': scan_methods,
            'device_types': device_types,
            'scan_activity': scan_activity,
            'top_cards': top_cards,
        }
