import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

MAIL = 'mail'
LOG = 'log'


class Notifier:
    '''Fire-and-forget record notifications.

    A failing channel is logged and reported through the return value;
    it never raises into the calling flow.
    '''

    channels = (MAIL, LOG)

    def __init__(self, recipients=None):
        self.recipients = recipients

    def get_recipients(self):
        if self.recipients is not None:
            return list(self.recipients)
        return [settings.NOTIFICATION_EMAIL]

    def message_for(self, record):
        if hasattr(record, 'notification_text'):
            return record.notification_text()
        return str(record)

    def notify(self, record, channel=MAIL):
        if channel not in self.channels:
            logger.warning('Unknown notification channel %r for %s', channel, record)
            return False

        try:
            text = self.message_for(record)
            if channel == MAIL:
                send_mail(
                    subject=f'{record._meta.verbose_name.title()}: {record}',
                    message=text,
                    from_email=settings.DEFAULT_FROM_EMAIL,
                    recipient_list=self.get_recipients(),
                )
            else:
                logger.info('Notification for %s: %s', record, text)
        except Exception as e:
            logger.error('Failed to send %s notification for %s: %s', channel, record, e, exc_info=True)
            return False
        return True
