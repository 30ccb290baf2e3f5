import logging

import streamlit as st

from fourier_lab import (
    DEFAULT_TERM_COUNT,
    TERM_COUNT_RANGE,
    InvalidParameter,
    ParseError,
    Settings,
    calculate,
    coefficient_table,
)
from fourier_lab.plotting import comparison_figure

# 計算進度輸出到終端機
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

# 設定頁面
st.set_page_config(page_title="傅立葉級數視覺化 (互動版)", layout="wide")

# --- 初始化 Session State (用來暫存計算結果) ---
if 'fourier_result' not in st.session_state:
    st.session_state['fourier_result'] = None

try:
    settings = Settings.from_env()
except InvalidParameter as e:
    st.error(f"環境變數設定錯誤: {e}")
    st.stop()

# --- 標題 ---
st.title("📈 傅立葉級數互動實驗室")
st.markdown(f"""
1. 輸入函數 f(x)，區間固定為 **[{settings.interval.lower:.4f}, {settings.interval.upper:.4f}]**。
2. 設定 **最大項數 (Max N)** 並按下計算。
3. 計算完成後，使用下方的 **拉桿** 即時調整 N 值，觀察波形如何逼近。
""")

# --- 側邊欄：快速範例 ---
st.sidebar.header("⚡ 快速範例")
example_options = {
    "自訂輸入": "",
    "正弦": "sin(x)",
    "方波 (Square)": "square(x)",
    "多週期方波": "square(3 * x)",
    "鋸齒波 (Sawtooth)": "sawtooth(x)",
    "三角波": "sawtooth(x, 0.5)",
    "全波整流": "abs(sin(x))",
    "拋物線": "x^2",
    "脈衝波": "square(x, 0.2)",
}
selected_example = st.sidebar.radio("選擇預設波形：", list(example_options.keys()))
default_func = example_options[selected_example] or "sin(x)"
st.sidebar.caption("支援 + - * / ^、括號、x、pi、e，以及 sin cos tan exp sqrt log abs sinh cosh tanh sign square sawtooth。")
half_constant = st.sidebar.checkbox("常數項取 a0/2 (以平均值重建)", value=settings.constant_term == "half")
settings = settings.override(constant_term="half" if half_constant else "full")

# --- 參數設定區 ---
col1, col2 = st.columns([3, 1])
with col1:
    func_str = st.text_input("函數 f(x)", value=default_func)
with col2:
    max_n = st.number_input(
        "最大項數 (計算上限)",
        value=DEFAULT_TERM_COUNT,
        min_value=TERM_COUNT_RANGE[0],
        max_value=TERM_COUNT_RANGE[1],
        step=1,
    )

# --- 按鈕區 ---
if st.button("🚀 開始計算 (建立係數庫)", type="primary"):
    with st.spinner("正在進行積分運算..."):
        try:
            result = calculate(func_str, int(max_n), settings)
        except ParseError as e:
            st.error(f"函數解析失敗: {e}")
        except InvalidParameter as e:
            st.error(f"參數錯誤: {e}")
        else:
            # 將結果存入 Session State，這樣拉動拉桿時才不會重算
            st.session_state['fourier_result'] = result
            st.rerun()

# --- 結果顯示區 (只有當計算過後才會出現) ---
if st.session_state['fourier_result'] is not None:
    res = st.session_state['fourier_result']

    st.divider()

    if res.degraded:
        st.warning(
            f"部分取樣點無法計算 (積分失敗 {res.coefficients.failed} 點，繪圖略過 {res.original.failed} 點)，"
            "結果僅供參考。"
        )

    # === 互動拉桿區 ===
    # 只用已算好的係數重建，不重新積分
    total_terms = len(res.coefficients)
    current_n = total_terms
    if total_terms > 1:
        current_n = st.slider(
            "🎚️ 調整 N 值 (觀察逼近過程)",
            min_value=1,
            max_value=total_terms,
            value=min(DEFAULT_TERM_COUNT, total_terms),
        )
    current = res.with_terms(current_n)

    # === 繪圖 ===
    fig = comparison_figure(current)
    st.pyplot(fig)
    st.caption(
        f"最大誤差: {current.comparison.max_error:.3e} · "
        f"相對 L2 誤差: {current.comparison.relative_l2_error:.3e}"
    )

    # === 係數表 ===
    df = coefficient_table(res.coefficients)
    with st.expander(f"查看前 {current_n} 項係數數值"):
        st.dataframe(df.head(current_n))

    csv_data = df.to_csv(index=False, sep='\t', encoding='utf-8-sig')
    st.download_button("📥 下載完整係數表 (CSV)", csv_data, "coeffs.csv", "text/csv")

    # 重置按鈕
    if st.button("🔄 清除結果 / 重新輸入"):
        st.session_state['fourier_result'] = None
        st.rerun()
