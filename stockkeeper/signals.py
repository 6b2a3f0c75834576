"""
Signals sent by Stockkeeper.

alert_raised is sent once the database transaction that created the alert
has committed:

    from django.dispatch import receiver
    from stockkeeper.signals import alert_raised

    @receiver(alert_raised)
    def notify_purchasing(sender, alert, **kwargs):
        ...
"""

from django.dispatch import Signal

alert_raised = Signal()
