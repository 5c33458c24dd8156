"""
Query documents for the two upstream services.

The documents are opaque to the cache; only the top-level fields the
fetchers read (``widgets`` and ``quarterlyMetrics``) matter.
"""

# Primary API: basic widget settings
SMARTMENU_SETTINGS_BASIC = """
query GetSmartMenuSettingsBasic {
  widgets {
    id
    name
    slug
    createdAt
    updatedAt
    publishedAt
    numberOfLocations
    numberOfLocationsSource
    displayImages
    layout
    isOrderButtonEnabled
    isByoEnabled
    isActive
    isSyncEnabled
    lastSyncedAt
    primaryBrandColor
    highlightColor
    backgroundColor
    orderUrl
    supportedAllergens
    displaySoftSignUp
    displayNotifyMeBanner
    displayGiveFeedbackBanner
    displayFeedbackButton
    displayDishDetailsLink
  }
}
"""

_GROWTH = "count qoqGrowth qoqGrowthPercent"

# Analytics warehouse: quarterly aggregates
QUARTERLY_METRICS = f"""
query GetQuarterlyMetrics {{
  quarterlyMetrics {{
    quarter
    year
    quarterLabel
    brands {{ {_GROWTH} }}
    locations {{ {_GROWTH} }}
    orders {{ {_GROWTH} }}
    activeSmartMenus {{ {_GROWTH} }}
    totalRevenue {{ amount qoqGrowth qoqGrowthPercent }}
  }}
}}
"""
