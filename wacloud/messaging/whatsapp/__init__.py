"""WhatsApp Cloud API messaging: request building, dispatch and envelopes."""
