"""
Limud Transcription Status Service.

Polls the transcription state of recordings on a fixed interval,
reports completion once per transition, and re-submits failed jobs
on request.
"""
