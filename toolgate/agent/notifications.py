# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Forwarding of out-of-band server notifications to the UI."""

import logging
from typing import List

from toolgate.agent.messages import MessageKind, UIMessenger
from toolgate.integrations.mcp.registry import Notification, ToolServerRegistry

logger = logging.getLogger(__name__)


class NotificationDrain:
    """Pull queued notifications for all servers and surface them in order.

    The registry clears its queue as part of the read, so a notification is
    forwarded at most once. Draining only reads the queue, it never waits.
    """

    def __init__(self, registry: ToolServerRegistry, ui: UIMessenger):
        self._registry = registry
        self._ui = ui

    async def drain(self) -> List[Notification]:
        """Forward every pending notification as its own message.

        Returns:
            The forwarded notifications, oldest first
        """
        notifications = self._registry.drain_pending_notifications()
        if notifications:
            logger.debug(f"Forwarding {len(notifications)} server notifications")
        for notification in notifications:
            await self._ui.say(MessageKind.MCP_NOTIFICATION, notification.format())
        return notifications
