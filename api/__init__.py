"""Inspection API for the KNXnet/IP frame codec."""
