"""
Default QC thresholds for rendered click tracks.
"""
QC_THRESHOLDS = {
    "spacing_jitter_samples": 1,  # max deviation of an onset from its expected offset
    "min_clicks": 1,              # a track with no audible click fails
}
