"""Streamlit page for interactive reverse postal code lookup."""
import pandas as pd
import pydeck as pdk
import streamlit as st
from postal_geocoder.core.config import DEFAULT_MAX_RESULTS, LOG_LEVEL
from postal_geocoder.core.geocoder import ReversePostalGeocoder
from postal_geocoder.core.errors import InvalidQueryPointError
from postal_geocoder.utils.logging import setup_logging
from postal_geocoder.utils.timing import Timer

# Setup logging
setup_logging(LOG_LEVEL)


@st.cache_resource(show_spinner="Loading geocoding data (this may take a while)...")
def load_geocoder() -> ReversePostalGeocoder:
    """Build the postal code index once per server process."""
    geocoder = ReversePostalGeocoder()
    geocoder.init()
    return geocoder


# Page configuration
st.set_page_config(
    page_title="Reverse Postal Code Geocoder",
    page_icon="📮",
    layout="wide"
)

st.title("📮 Reverse Postal Code Geocoder")
st.markdown("Find the nearest GeoNames postal codes for a latitude/longitude")

geocoder = load_geocoder()
st.caption(f"{len(geocoder.index):,} postal code records indexed")

# Input section
col1, col2, col3 = st.columns(3)
with col1:
    latitude = st.number_input("Latitude", min_value=-90.0, max_value=90.0, value=40.7547, format="%.6f")
with col2:
    longitude = st.number_input("Longitude", min_value=-180.0, max_value=180.0, value=-73.9925, format="%.6f")
with col3:
    max_results = st.slider("Max results", min_value=1, max_value=25, value=max(DEFAULT_MAX_RESULTS, 5))

if st.button("Look up", type="primary"):
    try:
        with Timer("reverse_lookup"):
            results = geocoder.look_up((latitude, longitude), max_results) or []
    except InvalidQueryPointError as e:
        st.error(f"Invalid coordinates: {e}")
        results = []

    if not results:
        st.info("No postal codes found")
    else:
        df = pd.DataFrame([result.to_dict() for result in results])
        df["distance"] = df["distance"].round(3)
        st.subheader("Results")
        st.dataframe(
            df[["postal_code", "place_name", "admin_name1", "admin_name2", "country_code",
                "latitude", "longitude", "accuracy", "distance"]],
            use_container_width=True
        )

        query_df = pd.DataFrame([{"latitude": latitude, "longitude": longitude}])
        st.pydeck_chart(pdk.Deck(
            map_style=None,
            initial_view_state=pdk.ViewState(latitude=latitude, longitude=longitude, zoom=11),
            layers=[
                pdk.Layer(
                    "ScatterplotLayer",
                    data=df,
                    get_position="[longitude, latitude]",
                    get_radius=80,
                    get_fill_color=[0, 114, 206, 180],
                    pickable=True,
                ),
                pdk.Layer(
                    "ScatterplotLayer",
                    data=query_df,
                    get_position="[longitude, latitude]",
                    get_radius=60,
                    get_fill_color=[220, 53, 69, 220],
                ),
            ],
            tooltip={"text": "{postal_code} {place_name}\n{distance} km"}
        ))
